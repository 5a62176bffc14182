"""Sign-in entry points.

Session establishment belongs to an external identity provider. When
AUTH_PROVIDER_URL is configured, /api/login hands the browser over to it.
Without one, sign-in is refused unless DEMO_LOGIN is on, in which case
/api/login signs in a demo user so the storefront can be used locally.
Demo sessions are never admins.
"""

from __future__ import annotations

from urllib.parse import urlencode

from flask import Blueprint, jsonify, redirect, request, session, url_for

from storefront.errors import ServiceUnavailableError
from storefront.services.logging import log_event

from .guards import app_config, components, is_admin, login_required, require_user, safe_next


auth_bp = Blueprint("auth", __name__, url_prefix="/api")

DEMO_USER = {
    "user_id": "demo-user",
    "email": "demo@example.com",
    "first_name": "Demo",
    "last_name": "Shopper",
}


@auth_bp.get("/login")
def login():
    target = safe_next(request.args.get("next"), url_for("pages.home"))
    provider = app_config().auth_provider_url
    if provider:
        sep = "&" if "?" in provider else "?"
        return redirect(f"{provider}{sep}{urlencode({'returnTo': request.host_url.rstrip('/') + target})}")
    if not app_config().demo_login:
        log_event("warning", "auth.login_refused", reason="no identity provider configured")
        raise ServiceUnavailableError("Sign-in is not available: no identity provider is configured")

    user_id = (request.args.get("user_id") or DEMO_USER["user_id"]).strip()
    profile = {
        "email": (request.args.get("email") or DEMO_USER["email"]).strip().lower(),
        "first_name": request.args.get("first_name") or DEMO_USER["first_name"],
        "last_name": request.args.get("last_name") or DEMO_USER["last_name"],
        "profile_image_url": request.args.get("profile_image_url"),
    }
    user = components()["storage"].upsert_user(user_id, profile)
    session.clear()
    session["user_id"] = user.id
    session["auth_source"] = "demo"
    log_event("info", "auth.login", user_id=user.id, provider="demo")
    return redirect(target)


@auth_bp.get("/logout")
def logout():
    user_id = session.get("user_id")
    session.clear()
    if user_id:
        log_event("info", "auth.logout", user_id=user_id)
    return redirect(url_for("pages.landing"))


@auth_bp.get("/auth/user")
@login_required
def current_user_info():
    user = require_user()
    data = user.to_dict()
    data["isAdmin"] = is_admin(user)
    return jsonify(data)
