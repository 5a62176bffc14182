"""Session helpers shared by the API, auth and page blueprints."""

from __future__ import annotations

from functools import wraps
from typing import Any, Dict, Optional

from flask import current_app, g, redirect, request, session, url_for

from storefront.config import AppConfig
from storefront.errors import ForbiddenError, UnauthorizedError
from storefront.storage.records import UserRecord


def components() -> Dict[str, Any]:
    return current_app.extensions["storefront_components"]


def app_config() -> AppConfig:
    return current_app.config["STOREFRONT_CONFIG"]


def current_user() -> Optional[UserRecord]:
    """The signed-in user, or None. A session pointing at a vanished user is dropped."""
    if "current_user" in g:
        return g.current_user
    user = None
    user_id = session.get("user_id")
    if user_id:
        user = components()["storage"].get_user(user_id)
        if user is None:
            session.pop("user_id", None)
    g.current_user = user
    return user


def is_admin(user: Optional[UserRecord]) -> bool:
    # demo sign-ins choose their own email, so they never count as admins
    if user is None or session.get("auth_source") == "demo":
        return False
    return app_config().is_admin_email(user.email)


def require_user() -> UserRecord:
    user = current_user()
    if user is None:
        raise UnauthorizedError()
    return user


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        require_user()
        return view(*args, **kwargs)

    return wrapped


def admin_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not is_admin(require_user()):
            raise ForbiddenError("Admin access required")
        return view(*args, **kwargs)

    return wrapped


def login_redirect():
    return redirect(url_for("auth.login", next=request.full_path.rstrip("?")))


def safe_next(target: Optional[str], default: str) -> str:
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return default
