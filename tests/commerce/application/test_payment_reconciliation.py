"""Webhook deliveries applied through the reconciler, signature to stock."""

import pytest
from commerce.exceptions import AuthenticationError, ProcessingError
from commerce.gateway.events import CheckoutSessionCompleted, UnhandledEvent
from commerce.order.order import Order, OrderStatus
from commerce.product.product import Product
from protean import current_domain


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).stock


def _complete(deliver, order_id, payment_intent_id="pi_1"):
    return deliver(
        "checkout.session.completed",
        {"metadata": {"orderId": order_id}, "payment_intent": payment_intent_id},
    )


@pytest.fixture()
def p1(create_product):
    return create_product(name="p1", price=500, stock=10)


@pytest.fixture()
def pending_order(orchestrator, p1):
    return orchestrator.checkout([{"product_id": p1.id, "quantity": 2}], "buyer@example.com").order_id


class TestSessionCompleted:
    def test_marks_paid_and_takes_stock(self, deliver, pending_order, p1):
        event = _complete(deliver, pending_order, "pi_123")

        assert isinstance(event, CheckoutSessionCompleted)
        order = _order(pending_order)
        assert order.status == OrderStatus.PAID.value
        assert order.payment_intent_id == "pi_123"
        assert _stock(p1.id) == 8

    def test_duplicate_delivery_takes_stock_once(self, deliver, pending_order, p1):
        _complete(deliver, pending_order)
        _complete(deliver, pending_order)

        assert _order(pending_order).status == OrderStatus.PAID.value
        assert _stock(p1.id) == 8

    def test_completion_after_expiry_is_ignored(self, deliver, pending_order, p1):
        deliver("checkout.session.expired", {"metadata": {"orderId": pending_order}})
        _complete(deliver, pending_order)

        assert _order(pending_order).status == OrderStatus.CANCELLED.value
        assert _stock(p1.id) == 10

    def test_unknown_order_is_acknowledged(self, deliver):
        event = _complete(deliver, "does-not-exist")
        assert isinstance(event, CheckoutSessionCompleted)

    def test_repeated_product_lines_take_summed_stock(self, orchestrator, deliver, create_product):
        product = create_product(stock=5)
        order_id = orchestrator.checkout(
            [{"product_id": product.id, "quantity": 1}, {"product_id": product.id, "quantity": 3}],
            "buyer@example.com",
        ).order_id

        _complete(deliver, order_id)

        assert _stock(product.id) == 1

    def test_oversold_order_fails_and_stays_pending(self, orchestrator, deliver, create_product):
        product = create_product(stock=3)
        first = orchestrator.checkout([{"product_id": product.id, "quantity": 2}], "a@example.com").order_id
        second = orchestrator.checkout([{"product_id": product.id, "quantity": 2}], "b@example.com").order_id
        _complete(deliver, first, "pi_first")

        with pytest.raises(ProcessingError, match="Webhook processing failed"):
            _complete(deliver, second, "pi_second")

        assert _order(second).status == OrderStatus.PENDING.value
        assert _stock(product.id) == 1

    def test_shortfall_on_one_product_rolls_back_the_others(self, orchestrator, deliver, create_product):
        lamp = create_product(name="Lamp", stock=5)
        bulb = create_product(name="Bulb", stock=5)
        order_id = orchestrator.checkout(
            [{"product_id": lamp.id, "quantity": 2}, {"product_id": bulb.id, "quantity": 3}],
            "pair@example.com",
        ).order_id

        repo = current_domain.repository_for(Product)
        bulb_record = repo.get(bulb.id)
        bulb_record.decrement_stock(4, reason="damaged")
        repo.add(bulb_record)

        with pytest.raises(ProcessingError):
            _complete(deliver, order_id, "pi_pair")

        assert _order(order_id).status == OrderStatus.PENDING.value
        assert _order(order_id).payment_intent_id is None
        assert _stock(lamp.id) == 5
        assert _stock(bulb.id) == 1

    def test_oversold_order_is_logged_distinctly(self, orchestrator, deliver, create_product, monkeypatch):
        from commerce.order import reconciliation

        recorded = []

        class RecordingLogger:
            def error(self, event, **kw):
                recorded.append((event, kw))

            def info(self, event, **kw):
                pass

            warning = info

        monkeypatch.setattr(reconciliation, "logger", RecordingLogger())
        product = create_product(stock=1)
        order_id = orchestrator.checkout([{"product_id": product.id, "quantity": 1}], "late@example.com").order_id
        taken = current_domain.repository_for(Product).get(product.id)
        taken.decrement_stock(1, reason="sold_elsewhere")
        current_domain.repository_for(Product).add(taken)

        with pytest.raises(ProcessingError):
            _complete(deliver, order_id, "pi_late")

        [(event, context)] = recorded
        assert event == "order_oversold"
        assert context["order_id"] == order_id
        assert context["payment_intent_id"] == "pi_late"


class TestSessionExpired:
    def test_cancels_pending_order_without_touching_stock(self, deliver, pending_order, p1):
        deliver("checkout.session.expired", {"metadata": {"orderId": pending_order}})

        assert _order(pending_order).status == OrderStatus.CANCELLED.value
        assert _stock(p1.id) == 10

    def test_expiry_after_payment_is_ignored(self, deliver, pending_order, p1):
        _complete(deliver, pending_order)
        deliver("checkout.session.expired", {"metadata": {"orderId": pending_order}})

        assert _order(pending_order).status == OrderStatus.PAID.value
        assert _stock(p1.id) == 8


class TestChargeRefunded:
    def test_refunds_paid_order_and_returns_stock(self, deliver, pending_order, p1):
        _complete(deliver, pending_order, "pi_refund")
        assert _stock(p1.id) == 8

        deliver("charge.refunded", {"payment_intent": "pi_refund"})

        assert _order(pending_order).status == OrderStatus.REFUNDED.value
        assert _stock(p1.id) == 10

    def test_duplicate_refund_returns_stock_once(self, deliver, pending_order, p1):
        _complete(deliver, pending_order, "pi_refund")
        deliver("charge.refunded", {"payment_intent": "pi_refund"})
        deliver("charge.refunded", {"payment_intent": "pi_refund"})

        assert _stock(p1.id) == 10

    def test_unknown_payment_intent_is_acknowledged(self, deliver, pending_order, p1):
        deliver("charge.refunded", {"payment_intent": "pi_unknown"})

        assert _order(pending_order).status == OrderStatus.PENDING.value
        assert _stock(p1.id) == 10

    def test_pending_order_is_not_refunded(self, deliver, pending_order, p1):
        order = _order(pending_order)
        order.payment_intent_id = "pi_early"
        current_domain.repository_for(Order).add(order)

        deliver("charge.refunded", {"payment_intent": "pi_early"})

        assert _order(pending_order).status == OrderStatus.PENDING.value
        assert _stock(p1.id) == 10

    def test_every_paid_order_on_the_intent_is_refunded(self, orchestrator, deliver, create_product):
        product = create_product(stock=10)
        first = orchestrator.checkout([{"product_id": product.id, "quantity": 1}], "a@example.com").order_id
        second = orchestrator.checkout([{"product_id": product.id, "quantity": 2}], "b@example.com").order_id
        _complete(deliver, first, "pi_shared")
        _complete(deliver, second, "pi_shared")
        assert _stock(product.id) == 7

        deliver("charge.refunded", {"payment_intent": "pi_shared"})

        assert _order(first).status == OrderStatus.REFUNDED.value
        assert _order(second).status == OrderStatus.REFUNDED.value
        assert _stock(product.id) == 10


class TestUntrustedAndIgnoredDeliveries:
    def test_bad_signature_changes_nothing(self, reconciler, event_payload, pending_order, p1):
        payload = event_payload(
            "checkout.session.completed",
            {"metadata": {"orderId": pending_order}, "payment_intent": "pi_forged"},
        )

        with pytest.raises(AuthenticationError):
            reconciler.reconcile(payload, "forged-signature")

        assert _order(pending_order).status == OrderStatus.PENDING.value
        assert _stock(p1.id) == 10

    def test_unsupported_event_is_ignored(self, deliver):
        event = deliver("invoice.paid", {"id": "in_1"})
        assert isinstance(event, UnhandledEvent)


class TestRoundTrip:
    def test_checkout_then_completion_then_query(self, orchestrator, deliver, create_product):
        from commerce.order.queries import OrderQuery

        product = create_product(name="Lamp", price=750, stock=4)
        result = orchestrator.checkout([{"product_id": product.id, "quantity": 1}], "trip@example.com")

        _complete(deliver, result.order_id, "pi_trip")

        view = OrderQuery().get(result.order_id)
        assert view["status"] == "PAID"
        assert view["payment_intent_id"] == "pi_trip"
        assert view["payment_session_id"] == result.session_id
        assert view["items"][0]["product"]["name"] == "Lamp"
