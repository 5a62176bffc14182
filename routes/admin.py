"""Admin panel pages."""

from __future__ import annotations

from decimal import Decimal

from flask import Blueprint, flash, redirect, render_template, request, url_for

from storefront.errors import ValidationError
from storefront.utils.validators import CATEGORIES, ORDER_STATUSES

from .guards import admin_required, app_config, components


admin_bp = Blueprint("admin", __name__, url_prefix="/admin")

BLANK_PRODUCT_FORM = {
    "name": "",
    "category": CATEGORIES[0],
    "price": "",
    "originalPrice": "",
    "description": "",
    "imageUrl": "",
    "cutStyles": "",
    "freshnessDays": "3",
    "stock": "0",
    "isOrganic": False,
}


@admin_bp.before_request
@admin_required
def guard_private_routes():
    return None


def _stats(orders, products) -> dict:
    revenue = sum((o.total_amount for o in orders if o.status != "cancelled"), Decimal("0"))
    return {
        "total_orders": len(orders),
        "revenue": revenue,
        "customers": len({o.user_id for o in orders}),
        "active_products": len(products),
    }


def _render_dashboard(status: str = "all", product_form=None, product_errors=None, code: int = 200):
    orders = components()["orders"].list_all_orders()
    products = components()["catalog"].list_products()
    shown = orders if status == "all" else [o for o in orders if o.status == status]
    page = render_template(
        "admin.html",
        stats=_stats(orders, products),
        orders=shown,
        products=products,
        statuses=ORDER_STATUSES,
        selected_status=status,
        categories=CATEGORIES,
        product_form=product_form or dict(BLANK_PRODUCT_FORM),
        product_errors=product_errors or {},
        currency=app_config().currency,
    )
    return page, code


def _form_from_product(product) -> dict:
    return {
        "name": product.name,
        "category": product.category,
        "price": f"{product.price:.2f}",
        "originalPrice": f"{product.original_price:.2f}" if product.original_price is not None else "",
        "description": product.description or "",
        "imageUrl": product.image_url or "",
        "cutStyles": ", ".join(product.cut_styles or []),
        "freshnessDays": str(product.freshness_days),
        "stock": str(product.stock),
        "isOrganic": product.is_organic,
    }


def _submitted_form() -> dict:
    form = {key: request.form.get(key, "").strip() for key in BLANK_PRODUCT_FORM if key != "isOrganic"}
    form["isOrganic"] = request.form.get("isOrganic") in ("on", "true", "1")
    return form


def _product_payload(form: dict) -> dict:
    """Admin form fields as a product payload; cut styles are comma separated."""
    return {
        "name": form["name"],
        "category": form["category"],
        "price": form["price"],
        "originalPrice": form["originalPrice"] or None,
        "description": form["description"],
        "imageUrl": form["imageUrl"],
        "cutStyles": [s.strip() for s in form["cutStyles"].split(",") if s.strip()],
        "freshnessDays": form["freshnessDays"] or 3,
        "stock": form["stock"] or 0,
        "isOrganic": form["isOrganic"],
    }


@admin_bp.get("/")
def dashboard():
    return _render_dashboard((request.args.get("status") or "all").lower())


@admin_bp.post("/orders/<order_id>/status")
def update_order_status(order_id: str):
    try:
        components()["orders"].update_status(order_id, request.form.get("status"))
        flash("Order status has been updated successfully.", "success")
    except ValidationError as exc:
        flash(exc.message, "error")
    return redirect(url_for("admin.dashboard"))


@admin_bp.post("/products")
def create_product():
    form = _submitted_form()
    try:
        product = components()["catalog"].create_product(_product_payload(form))
    except ValidationError as exc:
        return _render_dashboard(product_form=form, product_errors=exc.errors or {"": exc.message}, code=400)
    flash(f"{product.name} added to the catalog.", "success")
    return redirect(url_for("admin.dashboard"))


@admin_bp.get("/products/<product_id>/edit")
def edit_product(product_id: str):
    product = components()["catalog"].get_product(product_id)
    return render_template(
        "admin_product.html",
        product=product,
        form=_form_from_product(product),
        errors={},
        categories=CATEGORIES,
    )


@admin_bp.post("/products/<product_id>")
def update_product(product_id: str):
    product = components()["catalog"].get_product(product_id)
    form = _submitted_form()
    try:
        updated = components()["catalog"].update_product(product_id, _product_payload(form))
    except ValidationError as exc:
        page = render_template(
            "admin_product.html",
            product=product,
            form=form,
            errors=exc.errors or {"": exc.message},
            categories=CATEGORIES,
        )
        return page, 400
    flash(f"{updated.name} has been updated.", "success")
    return redirect(url_for("admin.dashboard"))


@admin_bp.post("/products/<product_id>/delete")
def delete_product(product_id: str):
    components()["catalog"].delete_product(product_id)
    flash("Product removed from the catalog.", "success")
    return redirect(url_for("admin.dashboard"))
