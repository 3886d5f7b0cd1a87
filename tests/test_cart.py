"""Tests for products, cart mutation and cart totals."""

from saucecart.backend import CATALOG, Cart, SessionStore


class TestProducts:
    """Tests for the fixed catalog."""

    def test_get_all_products(self, authed_store):
        response = authed_store.get_products()

        assert response.ok
        products = response.json()
        assert isinstance(products, list)
        assert [p["id"] for p in products] == ["1", "2"]

        # Verify product structure
        for product in products:
            assert set(product) == {"id", "name", "price", "description", "image_url"}

    def test_catalog_values(self, authed_store):
        backpack, bike_light = authed_store.get_products().json()

        assert backpack["name"] == "Sauce Labs Backpack"
        assert backpack["price"] == "29.99"
        assert bike_light["name"] == "Sauce Labs Bike Light"
        assert bike_light["image_url"] == "/img/sauce-bike-light.jpg"

    def test_catalog_cannot_be_mutated_through_response(self, authed_store):
        authed_store.get_products().json()[0]["price"] = "0.01"

        assert authed_store.get_products().json()[0]["price"] == "29.99"
        assert CATALOG[0].price == "29.99"


class TestAddToCart:
    """Tests for SessionStore.add_to_cart()."""

    def test_add_product(self, authed_store):
        response = authed_store.add_to_cart("1")

        assert response.status == 200
        assert response.json() == {"items": [{"id": "1"}]}

    def test_duplicate_add_is_rejected(self, authed_store):
        first = authed_store.add_to_cart("1")
        second = authed_store.add_to_cart("1")

        assert first.status == 200
        assert second.status == 400
        assert second.json() == {"message": "Product already in cart"}
        assert list(authed_store.cart) == ["1"]

    def test_insertion_order_is_preserved(self, authed_store):
        authed_store.add_to_cart("1")
        response = authed_store.add_to_cart("2")

        assert response.json() == {"items": [{"id": "1"}, {"id": "2"}]}

    def test_add_all_products(self, authed_store):
        product_ids = [p["id"] for p in authed_store.get_products().json()]

        for product_id in product_ids:
            assert authed_store.add_to_cart(product_id).ok

        items = authed_store.get_cart().json()["items"]
        assert items == [{"id": product_id} for product_id in product_ids]

    def test_unknown_product_is_accepted(self, authed_store):
        """The mock does not check ids against the catalog."""
        response = authed_store.add_to_cart("999")

        assert response.status == 200
        assert response.json()["items"] == [{"id": "999"}]


class TestRemoveFromCart:
    """Tests for SessionStore.remove_from_cart()."""

    def test_add_then_remove(self, authed_store):
        authed_store.add_to_cart("1")
        response = authed_store.remove_from_cart("1")

        assert response.status == 200
        assert response.json() == {"items": []}

    def test_remove_absent_product_is_noop(self, authed_store):
        authed_store.add_to_cart("2")
        response = authed_store.remove_from_cart("1")

        assert response.status == 200
        assert response.json() == {"items": [{"id": "2"}]}

    def test_remove_keeps_order_of_others(self, authed_store):
        for product_id in ("1", "2", "3"):
            authed_store.add_to_cart(product_id)

        response = authed_store.remove_from_cart("2")

        assert response.json()["items"] == [{"id": "1"}, {"id": "3"}]

    def test_product_can_be_added_again_after_removal(self, authed_store):
        authed_store.add_to_cart("1")
        authed_store.remove_from_cart("1")

        assert authed_store.add_to_cart("1").status == 200


class TestCartTotals:
    """Tests for SessionStore.get_cart()."""

    def test_empty_cart(self, authed_store):
        body = authed_store.get_cart().json()

        assert body == {"items": [], "total": "0.00", "tax": "0.00", "finalTotal": "0.00"}

    def test_totals_for_both_products(self, authed_store):
        authed_store.add_to_cart("1")
        authed_store.add_to_cart("2")

        body = authed_store.get_cart().json()

        # 29.99 + 9.99 = 39.98, tax 8% = 3.1984
        assert body["total"] == "39.98"
        assert body["tax"] == "3.20"
        assert body["finalTotal"] == "43.18"

    def test_unknown_products_cost_nothing(self, authed_store):
        authed_store.add_to_cart("1")
        authed_store.add_to_cart("999")

        assert authed_store.get_cart().json()["total"] == "29.99"

    def test_custom_tax_rate(self, saucecart_config):
        saucecart_config.pricing.tax_rate = 0.1
        store = SessionStore(saucecart_config)
        store.set_token("t")
        store.add_to_cart("2")

        body = store.get_cart().json()

        assert body["tax"] == "1.00"
        assert body["finalTotal"] == "10.99"


class TestSessionIsolation:
    """Separate stores never share state."""

    def test_carts_are_independent(self, authed_store):
        authed_store.add_to_cart("1")

        other = SessionStore()
        other.set_token("fake-token-123")

        assert other.get_cart().json()["items"] == []
        assert other.add_to_cart("1").status == 200

    def test_tokens_are_independent(self, authed_store):
        other = SessionStore()

        assert other.get_products().status == 401


class TestCart:
    """Unit tests for the order-preserving cart."""

    def test_add_reports_duplicates(self):
        cart = Cart()

        assert cart.add("a") is True
        assert cart.add("a") is False
        assert len(cart) == 1

    def test_remove_reports_absence(self):
        cart = Cart()
        cart.add("a")

        assert cart.remove("b") is False
        assert cart.remove("a") is True
        assert "a" not in cart

    def test_snapshot_is_detached(self):
        cart = Cart()
        cart.add("a")
        snapshot = cart.snapshot()
        cart.add("b")

        assert snapshot == ("a",)
        assert cart.view() == [{"id": "a"}, {"id": "b"}]
