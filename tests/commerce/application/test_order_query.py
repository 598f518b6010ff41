import pytest
from commerce.exceptions import NotFoundError
from commerce.order.queries import OrderQuery


class TestOrderQuery:
    def test_returns_order_with_items_and_products(self, orchestrator, create_product):
        lamp = create_product(name="Lamp", price=500, stock=10)
        bulb = create_product(name="Bulb", price=150, stock=10)
        result = orchestrator.checkout(
            [{"product_id": lamp.id, "quantity": 2}, {"product_id": bulb.id, "quantity": 1}],
            "reader@example.com",
        )

        view = OrderQuery().get(result.order_id)

        assert view["id"] == result.order_id
        assert view["customer_email"] == "reader@example.com"
        assert view["status"] == "PENDING"
        assert view["total_amount"] == 1150
        assert view["currency"] == "usd"
        assert view["payment_session_id"] == result.session_id
        assert view["payment_intent_id"] is None
        assert [(i["product"]["name"], i["quantity"], i["unit_price"]) for i in view["items"]] == [
            ("Lamp", 2, 500),
            ("Bulb", 1, 150),
        ]

    def test_unit_price_is_a_snapshot(self, orchestrator, create_product):
        from commerce.product.product import Product
        from protean import current_domain

        product = create_product(price=500, stock=10)
        result = orchestrator.checkout([{"product_id": product.id, "quantity": 1}], "snap@example.com")

        repo = current_domain.repository_for(Product)
        stored = repo.get(product.id)
        stored.update(price=900)
        repo.add(stored)

        item = OrderQuery().get(result.order_id)["items"][0]
        assert item["unit_price"] == 500
        assert item["product"]["price"] == 900

    def test_missing_order(self):
        with pytest.raises(NotFoundError, match="Order not found"):
            OrderQuery().get("missing")
