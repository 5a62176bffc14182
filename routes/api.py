"""Storefront REST API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from storefront.utils.dto import to_cart_dto

from .guards import admin_required, app_config, components, is_admin, login_required, require_user


api_bp = Blueprint("api", __name__, url_prefix="/api")


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@api_bp.get("/health")
def health():
    return jsonify({"status": "ok", "storage": components()["storage"].name})


# products


@api_bp.get("/products")
def list_products():
    products = components()["catalog"].list_products(
        category=request.args.get("category"),
        query=request.args.get("q"),
        sort=request.args.get("sort"),
    )
    return jsonify([p.to_dict() for p in products])


@api_bp.get("/products/<product_id>")
def get_product(product_id: str):
    return jsonify(components()["catalog"].get_product(product_id).to_dict())


@api_bp.post("/products")
@admin_required
def create_product():
    product = components()["catalog"].create_product(_payload())
    return jsonify(product.to_dict()), 201


@api_bp.put("/products/<product_id>")
@admin_required
def update_product(product_id: str):
    product = components()["catalog"].update_product(product_id, _payload())
    return jsonify(product.to_dict())


@api_bp.delete("/products/<product_id>")
@admin_required
def delete_product(product_id: str):
    components()["catalog"].delete_product(product_id)
    return jsonify({"status": "ok"})


# cart


@api_bp.get("/cart")
@login_required
def get_cart():
    items, totals = components()["cart"].get_cart(require_user().id)
    return jsonify(to_cart_dto(items, totals, app_config().currency))


@api_bp.post("/cart")
@login_required
def add_to_cart():
    payload = _payload()
    item = components()["cart"].add_item(
        user_id=require_user().id,
        product_id=payload.get("productId"),
        quantity=payload.get("quantity", 1),
        cut_style=payload.get("cutStyle"),
    )
    return jsonify(item.to_dict()), 201


@api_bp.put("/cart/<item_id>")
@login_required
def update_cart_item(item_id: str):
    item = components()["cart"].update_item(
        user_id=require_user().id,
        item_id=item_id,
        quantity=_payload().get("quantity"),
    )
    if item is None:
        return jsonify({"status": "removed", "id": item_id})
    return jsonify(item.to_dict())


@api_bp.delete("/cart/<item_id>")
@login_required
def remove_cart_item(item_id: str):
    components()["cart"].remove_item(user_id=require_user().id, item_id=item_id)
    return jsonify({"status": "ok"})


@api_bp.delete("/cart")
@login_required
def clear_cart():
    removed = components()["cart"].clear(require_user().id)
    return jsonify({"status": "ok", "removed": removed})


# orders


@api_bp.post("/orders")
@login_required
def place_order():
    order = components()["orders"].place_order(user_id=require_user().id, payload=request.get_json(silent=True))
    return jsonify(order.to_dict()), 201


@api_bp.get("/orders")
@login_required
def list_orders():
    orders = components()["orders"].list_orders(require_user().id)
    return jsonify([o.to_dict() for o in orders])


@api_bp.get("/orders/all")
@admin_required
def list_all_orders():
    return jsonify([o.to_dict() for o in components()["orders"].list_all_orders()])


@api_bp.get("/orders/<order_id>")
@login_required
def get_order(order_id: str):
    user = require_user()
    owner = None if is_admin(user) else user.id
    return jsonify(components()["orders"].get_order(order_id, user_id=owner).to_dict())


@api_bp.put("/orders/<order_id>/status")
@admin_required
def update_order_status(order_id: str):
    order = components()["orders"].update_status(order_id, _payload().get("status"))
    return jsonify(order.to_dict())


# wishlist


@api_bp.get("/wishlist")
@login_required
def get_wishlist():
    entries = components()["wishlist"].list(require_user().id)
    return jsonify([w.to_dict() for w in entries])


@api_bp.post("/wishlist")
@login_required
def add_to_wishlist():
    entry = components()["wishlist"].add(user_id=require_user().id, product_id=_payload().get("productId"))
    return jsonify(entry.to_dict()), 201


@api_bp.delete("/wishlist/<product_id>")
@login_required
def remove_from_wishlist(product_id: str):
    components()["wishlist"].remove(user_id=require_user().id, product_id=product_id)
    return jsonify({"status": "ok"})
