"""Vegetable storefront Flask application."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, render_template, request
from werkzeug.exceptions import HTTPException

from routes import admin, api, auth, pages
from routes.guards import login_redirect
from storefront.config import AppConfig, load_env
from storefront.errors import StorefrontError, UnauthorizedError
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.logging import configure_logging, log_event
from storefront.services.order_service import OrderService
from storefront.services.pricing import PricingPolicy
from storefront.services.wishlist_service import WishlistService
from storefront.storage import Storage, build_storage


def _wants_json() -> bool:
    return request.path.startswith("/api/")


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(StorefrontError)
    def handle_storefront_error(exc: StorefrontError):
        if _wants_json():
            return jsonify(exc.to_dict()), exc.status_code
        if isinstance(exc, UnauthorizedError):
            return login_redirect()
        return render_template("error.html", status=exc.status_code, message=exc.message), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        if _wants_json():
            return jsonify({"error": exc.description}), exc.code
        return exc

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        log_event("error", "request.failed", method=request.method, path=request.path, error=repr(exc))
        if _wants_json():
            return jsonify({"error": "Internal server error"}), 500
        return render_template("error.html", status=500, message="Something went wrong. Please try again."), 500


def create_app(config: Optional[AppConfig] = None, storage: Optional[Storage] = None) -> Flask:
    config = config or load_env()
    configure_logging(config.log_level)
    app = Flask(
        __name__,
        template_folder=str(Path(__file__).parent / "templates"),
        static_folder=str(Path(__file__).parent / "static"),
    )
    app.config["SECRET_KEY"] = config.secret_key
    app.config["STOREFRONT_CONFIG"] = config

    storage = storage or build_storage(config)
    policy = PricingPolicy.from_config(config)
    components = {
        "storage": storage,
        "catalog": CatalogService(storage),
        "cart": CartService(storage, policy),
        "orders": OrderService(storage, policy, config.currency),
        "wishlist": WishlistService(storage),
    }
    app.extensions["storefront_components"] = components

    app.register_blueprint(pages.pages_bp)
    app.register_blueprint(admin.admin_bp)
    app.register_blueprint(auth.auth_bp)
    app.register_blueprint(api.api_bp)
    _register_error_handlers(app)

    @app.template_filter("money")
    def money_filter(value) -> str:
        return f"{config.currency} {value:.2f}" if value is not None else ""

    log_event("info", "app.started", storage=storage.name, currency=config.currency)
    return app


def main() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=False)


if __name__ == "__main__":
    main()
