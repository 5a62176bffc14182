"""Server-rendered storefront pages."""

from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, request, url_for

from storefront.errors import ValidationError
from storefront.utils.validators import ADDRESS_FIELDS, CATEGORIES, PAYMENT_METHODS

from .guards import app_config, components, current_user, login_required, require_user, safe_next


pages_bp = Blueprint("pages", __name__)

DELIVERY_SLOTS = ("9am-12pm", "12pm-3pm", "3pm-6pm", "6pm-9pm")
SORT_LABELS = {
    "popularity": "Popularity",
    "price-low": "Price: low to high",
    "price-high": "Price: high to low",
    "newest": "Newest first",
}


def _flash_validation(exc: ValidationError) -> None:
    for message in (exc.errors or {"": exc.message}).values():
        flash(message, "error")


@pages_bp.get("/")
def landing():
    if current_user() is not None:
        return redirect(url_for("pages.home"))
    featured = components()["catalog"].list_products()[:3]
    return render_template("landing.html", products=featured)


@pages_bp.get("/home")
@login_required
def home():
    products = components()["catalog"].list_products()
    return render_template("home.html", products=products, categories=CATEGORIES)


@pages_bp.get("/catalog")
def catalog():
    selected = (request.args.get("category") or "all").lower()
    query = (request.args.get("q") or "").strip()
    sort = (request.args.get("sort") or "popularity").lower()
    products = components()["catalog"].list_products(category=selected, query=query, sort=sort)
    return render_template(
        "catalog.html",
        products=products,
        categories=CATEGORIES,
        selected=selected,
        query=query,
        sort=sort,
        sort_options=SORT_LABELS,
    )


@pages_bp.get("/product/<product_id>")
def product_detail(product_id: str):
    product = components()["catalog"].get_product(product_id)
    return render_template("product_detail.html", product=product)


@pages_bp.post("/product/<product_id>/cart")
@login_required
def add_to_cart(product_id: str):
    try:
        components()["cart"].add_item(
            user_id=require_user().id,
            product_id=product_id,
            quantity=request.form.get("quantity", 1),
            cut_style=request.form.get("cutStyle"),
        )
    except ValidationError as exc:
        _flash_validation(exc)
        return redirect(url_for("pages.product_detail", product_id=product_id))
    flash("Added to cart", "success")
    return redirect(url_for("pages.cart"))


@pages_bp.post("/product/<product_id>/wishlist")
@login_required
def add_to_wishlist(product_id: str):
    components()["wishlist"].add(user_id=require_user().id, product_id=product_id)
    flash("Saved to your wishlist", "success")
    return redirect(safe_next(request.form.get("next"), url_for("pages.product_detail", product_id=product_id)))


@pages_bp.get("/cart")
@login_required
def cart():
    items, totals = components()["cart"].get_cart(require_user().id)
    return render_template("cart.html", items=items, totals=totals, currency=app_config().currency)


@pages_bp.post("/cart/<item_id>")
@login_required
def update_cart_item(item_id: str):
    try:
        components()["cart"].update_item(
            user_id=require_user().id,
            item_id=item_id,
            quantity=request.form.get("quantity"),
        )
    except ValidationError as exc:
        _flash_validation(exc)
    return redirect(url_for("pages.cart"))


@pages_bp.post("/cart/<item_id>/remove")
@login_required
def remove_cart_item(item_id: str):
    components()["cart"].remove_item(user_id=require_user().id, item_id=item_id)
    flash("Item removed", "success")
    return redirect(url_for("pages.cart"))


def _checkout_form() -> dict:
    address = {key: request.form.get(key, "") for key in list(ADDRESS_FIELDS) + ["pinCode"]}
    return {
        "deliveryAddress": address,
        "paymentMethod": request.form.get("paymentMethod", ""),
        "deliverySlot": request.form.get("deliverySlot", ""),
    }


def _render_checkout(user_id: str, form: dict, errors: dict, status: int = 200):
    items, totals = components()["cart"].get_cart(user_id)
    return (
        render_template(
            "checkout.html",
            items=items,
            totals=totals,
            form=form,
            errors=errors,
            slots=DELIVERY_SLOTS,
            payment_methods=PAYMENT_METHODS,
            currency=app_config().currency,
        ),
        status,
    )


@pages_bp.route("/checkout", methods=["GET", "POST"])
@login_required
def checkout():
    user = require_user()
    if request.method == "GET":
        form = {"deliveryAddress": {}, "paymentMethod": "cash", "deliverySlot": ""}
        return _render_checkout(user.id, form, {})

    form = _checkout_form()
    try:
        order = components()["orders"].place_order(user_id=user.id, payload=form)
    except ValidationError as exc:
        return _render_checkout(user.id, form, exc.errors or {"": exc.message}, 400)
    flash(f"Order placed successfully! Order #{order.id[:8]}", "success")
    return redirect(url_for("pages.dashboard"))


@pages_bp.get("/dashboard")
@login_required
def dashboard():
    user = require_user()
    orders = components()["orders"].list_orders(user.id)
    wishlist = components()["wishlist"].list(user.id)
    return render_template("dashboard.html", user=user, orders=orders, wishlist=wishlist)


@pages_bp.post("/wishlist/<product_id>/remove")
@login_required
def remove_from_wishlist(product_id: str):
    components()["wishlist"].remove(user_id=require_user().id, product_id=product_id)
    flash("Removed from wishlist", "success")
    return redirect(url_for("pages.dashboard"))
