from urllib.parse import parse_qs, urlparse

from tests.conftest import ADMIN_EMAIL, make_config, signed_in

from app import create_app
from storefront.storage import MemoryStorage


def add(client, product_id="1", quantity=1, cut_style=None):
    body = {"productId": product_id, "quantity": quantity}
    if cut_style:
        body["cutStyle"] = cut_style
    return client.post("/api/cart", json=body)


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok", "storage": "memory"}


class TestCatalogApi:
    def test_products_are_public(self, client):
        response = client.get("/api/products")

        assert response.status_code == 200
        products = response.get_json()
        assert len(products) == 6
        assert {"id", "name", "price", "cutStyles", "isActive"} <= set(products[0])

    def test_filter_by_category(self, client):
        products = client.get("/api/products", query_string={"category": "leafy"}).get_json()

        assert {p["id"] for p in products} == {"1", "5"}

    def test_search_and_sort(self, client):
        products = client.get("/api/products", query_string={"q": "salads", "sort": "price-low"}).get_json()

        assert [p["id"] for p in products] == ["2", "6"]

    def test_product_detail(self, client):
        response = client.get("/api/products/2")

        assert response.get_json()["name"] == "Fresh Carrots"
        assert response.get_json()["price"] == "32.00"
        assert client.get("/api/products/missing").status_code == 404

    def test_product_admin_endpoints_need_admin(self, client, user_client):
        assert client.post("/api/products", json={"name": "Okra"}).status_code == 401
        assert user_client.post("/api/products", json={"name": "Okra"}).status_code == 403
        assert user_client.delete("/api/products/1").status_code == 403

    def test_admin_manages_products(self, admin_client, client):
        created = admin_client.post(
            "/api/products",
            json={"name": "Okra", "category": "seasonal", "price": "30", "cutStyles": ["Whole"], "stock": 20},
        )
        assert created.status_code == 201
        product_id = created.get_json()["id"]

        updated = admin_client.put(f"/api/products/{product_id}", json={"price": "28"})
        assert updated.get_json()["price"] == "28.00"

        assert admin_client.delete(f"/api/products/{product_id}").status_code == 200
        assert client.get(f"/api/products/{product_id}").status_code == 404

    def test_invalid_product_lists_field_errors(self, admin_client):
        response = admin_client.post("/api/products", json={"category": "fruit"})

        assert response.status_code == 400
        assert {"name", "category", "price"} <= set(response.get_json()["errors"])

    def test_huge_price_is_a_field_error(self, admin_client):
        response = admin_client.post("/api/products", json={"name": "Okra", "category": "seasonal", "price": "1e30"})

        assert response.status_code == 400
        assert "price" in response.get_json()["errors"]


class TestCartApi:
    def test_cart_requires_login(self, client):
        assert client.get("/api/cart").status_code == 401
        assert add(client).status_code == 401
        assert client.get("/api/cart").get_json() == {"error": "Unauthorized"}

    def test_adding_twice_merges(self, user_client):
        first = add(user_client, "2", 2, "Diced")
        second = add(user_client, "2", 3, "Diced")

        assert first.status_code == 201
        assert second.get_json()["id"] == first.get_json()["id"]
        cart = user_client.get("/api/cart").get_json()
        assert [it["quantity"] for it in cart["items"]] == [5]
        assert cart["summary"]["subtotal"] == "160.00"
        assert cart["currency"] == "INR"

    def test_cart_summary(self, user_client):
        add(user_client, "1", 2, "Chopped")
        add(user_client, "2", 1, "Diced")

        summary = user_client.get("/api/cart").get_json()["summary"]

        assert summary == {
            "itemCount": 3,
            "subtotal": "122.00",
            "tax": "22.00",
            "deliveryFee": "50.00",
            "total": "194.00",
            "freeDeliveryRemaining": "378.00",
        }

    def test_update_and_remove(self, user_client):
        item_id = add(user_client, "4").get_json()["id"]

        assert user_client.put(f"/api/cart/{item_id}", json={"quantity": 3}).get_json()["quantity"] == 3
        removed = user_client.put(f"/api/cart/{item_id}", json={"quantity": 0})
        assert removed.get_json()["status"] == "removed"
        assert user_client.get("/api/cart").get_json()["items"] == []

    def test_bad_quantity(self, user_client):
        response = add(user_client, "1", -1)

        assert response.status_code == 400
        assert "quantity" in response.get_json()["errors"]

    def test_overflowing_quantity_is_a_field_error(self, user_client):
        response = user_client.post(
            "/api/cart", data='{"productId": "1", "quantity": 1e999}', content_type="application/json"
        )

        assert response.status_code == 400
        assert "quantity" in response.get_json()["errors"]

    def test_other_users_item_is_not_found(self, user_client, other_client):
        item_id = add(user_client, "4").get_json()["id"]

        assert other_client.delete(f"/api/cart/{item_id}").status_code == 404
        assert other_client.put(f"/api/cart/{item_id}", json={"quantity": 2}).status_code == 404
        assert len(user_client.get("/api/cart").get_json()["items"]) == 1

    def test_clear_cart(self, user_client):
        add(user_client, "1")
        add(user_client, "2")

        assert user_client.delete("/api/cart").get_json() == {"status": "ok", "removed": 2}


class TestOrdersApi:
    def test_place_order(self, user_client, checkout_payload):
        add(user_client, "1", 2, "Chopped")
        add(user_client, "2", 1, "Diced")

        response = user_client.post("/api/orders", json=checkout_payload)

        assert response.status_code == 201
        order = response.get_json()
        assert order["totalAmount"] == "194.00"
        assert order["status"] == "pending"
        assert len(order["orderItems"]) == 2
        assert user_client.get("/api/cart").get_json()["items"] == []
        assert [o["id"] for o in user_client.get("/api/orders").get_json()] == [order["id"]]
        assert user_client.get(f"/api/orders/{order['id']}").status_code == 200

    def test_empty_cart(self, user_client, checkout_payload):
        response = user_client.post("/api/orders", json=checkout_payload)

        assert response.status_code == 400
        assert "cart" in response.get_json()["errors"]

    def test_bad_pin_code(self, user_client, checkout_payload):
        add(user_client, "1")
        checkout_payload["orderData"]["deliveryAddress"]["pinCode"] = "4110"

        response = user_client.post("/api/orders", json=checkout_payload)

        assert response.status_code == 400
        assert "deliveryAddress.pinCode" in response.get_json()["errors"]

    def test_orders_are_private(self, user_client, other_client, admin_client, checkout_payload):
        add(user_client, "1")
        order_id = user_client.post("/api/orders", json=checkout_payload).get_json()["id"]

        assert other_client.get(f"/api/orders/{order_id}").status_code == 404
        assert other_client.get("/api/orders").get_json() == []
        assert admin_client.get(f"/api/orders/{order_id}").status_code == 200

    def test_admin_order_endpoints(self, user_client, admin_client, checkout_payload):
        add(user_client, "1")
        order_id = user_client.post("/api/orders", json=checkout_payload).get_json()["id"]

        assert user_client.get("/api/orders/all").status_code == 403
        assert user_client.put(f"/api/orders/{order_id}/status", json={"status": "delivered"}).status_code == 403

        assert [o["id"] for o in admin_client.get("/api/orders/all").get_json()] == [order_id]
        updated = admin_client.put(f"/api/orders/{order_id}/status", json={"status": "delivered"})
        assert updated.get_json()["status"] == "delivered"
        assert admin_client.put(f"/api/orders/{order_id}/status", json={"status": "lost"}).status_code == 400


class TestWishlistApi:
    def test_wishlist_flow(self, user_client):
        assert user_client.post("/api/wishlist", json={"productId": "5"}).status_code == 201
        assert user_client.post("/api/wishlist", json={"productId": "5"}).status_code == 201

        entries = user_client.get("/api/wishlist").get_json()
        assert [w["productId"] for w in entries] == ["5"]
        assert entries[0]["product"]["name"] == "Organic Kale"

        assert user_client.delete("/api/wishlist/5").status_code == 200
        assert user_client.delete("/api/wishlist/5").status_code == 404


class TestAuth:
    def test_current_user(self, user_client, admin_client, client):
        me = user_client.get("/api/auth/user").get_json()
        assert me["id"] == "user-1"
        assert me["isAdmin"] is False
        assert admin_client.get("/api/auth/user").get_json()["isAdmin"] is True
        assert client.get("/api/auth/user").status_code == 401

    def test_logout(self, user_client):
        response = user_client.get("/api/logout")

        assert response.status_code == 302
        assert user_client.get("/api/cart").status_code == 401

    def test_login_ignores_offsite_next(self, client):
        response = client.get("/api/login", query_string={"next": "//evil.example.com/"})

        assert urlparse(response.headers["Location"]).path == "/home"

    def test_provider_redirect(self):
        app = create_app(make_config(auth_provider_url="https://id.example.com/authorize"), storage=MemoryStorage())

        response = app.test_client().get("/api/login", query_string={"next": "/cart"})

        location = urlparse(response.headers["Location"])
        assert response.status_code == 302
        assert location.netloc == "id.example.com"
        assert parse_qs(location.query)["returnTo"] == ["http://localhost/cart"]

    def test_empty_admin_list_makes_everyone_admin(self):
        app = create_app(make_config(admin_emails=[]), storage=MemoryStorage())
        client = signed_in(app, "anyone", "anyone@example.com")

        assert client.get("/api/orders/all").status_code == 200

    def test_login_is_refused_without_provider_or_demo_mode(self, checkout_payload):
        app = create_app(make_config(demo_login=False), storage=MemoryStorage())
        victim = signed_in(app, "user-1", "shopper@example.com")
        victim.post("/api/cart", json={"productId": "1"})
        victim.post("/api/orders", json=checkout_payload)

        intruder = app.test_client()
        response = intruder.get("/api/login", query_string={"user_id": "user-1"})

        assert response.status_code == 503
        assert intruder.get("/api/orders").status_code == 401
        assert len(victim.get("/api/orders").get_json()) == 1

    def test_demo_login_never_grants_admin(self, client):
        client.get("/api/login", query_string={"user_id": "sneaky", "email": ADMIN_EMAIL})

        assert client.get("/api/auth/user").get_json()["isAdmin"] is False
        assert client.get("/api/orders/all").status_code == 403
        assert client.get("/admin/").status_code == 403


class TestPages:
    def test_public_pages(self, client):
        assert client.get("/").status_code == 200
        assert client.get("/catalog").status_code == 200
        assert client.get("/catalog?category=root").status_code == 200
        assert b"Fresh Carrots" in client.get("/product/2").data
        assert client.get("/product/missing").status_code == 404

    def test_catalog_search_and_sort(self, client):
        response = client.get("/catalog", query_string={"q": "salads", "sort": "price-high"})

        assert response.status_code == 200
        assert response.data.index(b"Fresh Tomatoes") < response.data.index(b"Fresh Carrots")
        assert b"Fresh Spinach" not in response.data
        assert b"No vegetables match" in client.get("/catalog?q=durian").data

    def test_private_pages_redirect_to_login(self, client):
        for path in ("/home", "/cart", "/checkout", "/dashboard"):
            response = client.get(path)
            assert response.status_code == 302
            assert urlparse(response.headers["Location"]).path == "/api/login"

    def test_signed_in_landing_goes_home(self, user_client):
        response = user_client.get("/")

        assert response.status_code == 302
        assert urlparse(response.headers["Location"]).path == "/home"

    def test_shopping_pages(self, user_client):
        user_client.post("/product/1/cart", data={"quantity": "2", "cutStyle": "Chopped"})

        cart = user_client.get("/cart")
        assert cart.status_code == 200
        assert b"Fresh Spinach" in cart.data
        assert user_client.get("/checkout").status_code == 200
        assert user_client.get("/dashboard").status_code == 200

    def test_checkout_form_errors(self, user_client):
        user_client.post("/product/1/cart", data={"quantity": "1"})

        response = user_client.post(
            "/checkout",
            data={"firstName": "Asha", "lastName": "Rao", "street": "1 Road", "city": "Pune", "state": "MH", "pinCode": "12", "paymentMethod": "cash"},
        )

        assert response.status_code == 400
        assert b"PIN code must be 6 digits" in response.data

    def test_checkout_form_places_order(self, user_client, app):
        user_client.post("/product/1/cart", data={"quantity": "1"})

        response = user_client.post(
            "/checkout",
            data={"firstName": "Asha", "lastName": "Rao", "street": "1 Road", "city": "Pune", "state": "MH", "pinCode": "411001", "paymentMethod": "cash"},
        )

        assert response.status_code == 302
        assert urlparse(response.headers["Location"]).path == "/dashboard"
        assert len(app.extensions["storefront_components"]["orders"].list_orders("user-1")) == 1

    def test_admin_panel(self, user_client, admin_client):
        assert user_client.get("/admin/").status_code == 403
        response = admin_client.get("/admin/")
        assert response.status_code == 200
        assert b"Fresh Spinach" in response.data

    def test_product_cards_offer_cart_and_wishlist(self, user_client, app):
        page = user_client.get("/catalog?category=root").data
        assert b'action="/product/2/cart"' in page
        assert b'action="/product/2/wishlist"' in page

        user_client.post("/product/2/cart", data={"quantity": "1"})
        response = user_client.post("/product/2/wishlist", data={"next": "/catalog?category=root"})

        assert response.headers["Location"].endswith("/catalog?category=root")
        assert [i.product_id for i in app.extensions["storefront_components"]["cart"].get_cart("user-1")[0]] == ["2"]
        assert [w.product_id for w in app.extensions["storefront_components"]["wishlist"].list("user-1")] == ["2"]

    def test_wishlist_ignores_offsite_next(self, user_client):
        response = user_client.post("/product/2/wishlist", data={"next": "//evil.example.com/"})

        assert urlparse(response.headers["Location"]).path == "/product/2"

    def test_dashboard_moves_wishlist_item_to_cart(self, user_client):
        user_client.post("/product/5/wishlist")
        dashboard = user_client.get("/dashboard").data
        assert b'action="/product/5/cart"' in dashboard

        user_client.post("/product/5/cart", data={"quantity": "1"})

        assert b"Organic Kale" in user_client.get("/cart").data

    def test_dashboard_shows_line_totals(self, user_client):
        user_client.post("/product/1/cart", data={"quantity": "3"})
        user_client.post(
            "/checkout",
            data={"firstName": "Asha", "lastName": "Rao", "street": "1 Road", "city": "Pune", "state": "MH", "pinCode": "411001", "paymentMethod": "cash"},
        )

        assert b"INR 135.00" in user_client.get("/dashboard").data

    def test_admin_adds_product_from_form(self, admin_client, app):
        assert b'action="/admin/products"' in admin_client.get("/admin/").data

        response = admin_client.post(
            "/admin/products",
            data={"name": "Baby Corn", "category": "seasonal", "price": "60", "cutStyles": "Whole, Halved", "stock": "10", "freshnessDays": "4", "isOrganic": "on"},
        )

        assert response.status_code == 302
        created = [p for p in app.extensions["storefront_components"]["catalog"].list_products() if p.name == "Baby Corn"]
        assert len(created) == 1
        assert created[0].cut_styles == ["Whole", "Halved"]
        assert created[0].is_organic is True

    def test_admin_product_form_errors(self, admin_client):
        response = admin_client.post("/admin/products", data={"name": "Baby Corn", "category": "seasonal", "price": "cheap"})

        assert response.status_code == 400
        assert b"price must be a number" in response.data
        assert b'value="Baby Corn"' in response.data

    def test_admin_edits_product(self, admin_client, user_client, app):
        assert user_client.get("/admin/products/1/edit").status_code == 403
        page = admin_client.get("/admin/products/1/edit")
        assert page.status_code == 200
        assert b'value="45.00"' in page.data

        form = {"name": "Fresh Spinach", "category": "leafy", "price": "40", "cutStyles": "Whole Leaves, Chopped", "stock": "50", "freshnessDays": "2"}
        assert admin_client.post("/admin/products/1", data=dict(form, price="-3")).status_code == 400
        response = admin_client.post("/admin/products/1", data=form)

        assert response.status_code == 302
        product = app.extensions["storefront_components"]["catalog"].get_product("1")
        assert str(product.price) == "40.00"
        assert product.cut_styles == ["Whole Leaves", "Chopped"]
        assert admin_client.get("/admin/products/missing/edit").status_code == 404
