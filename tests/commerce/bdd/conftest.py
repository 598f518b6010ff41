"""Shared BDD fixtures and step definitions for the order payment lifecycle."""

import pytest
from commerce.order.order import Order
from commerce.product.product import Product
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def catalog():
    """Product ids by the names used in scenarios."""
    return {}


@pytest.fixture()
def checkout_state():
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced at {price:d} with {stock:d} in stock'))
def _product(create_product, catalog, name, price, stock):
    catalog[name] = create_product(name=name, price=price, stock=stock).id


@given(parsers.cfparse('a customer checked out {quantity:d} of "{name}"'))
@when(parsers.cfparse('a customer checks out {quantity:d} of "{name}"'))
def _checkout(orchestrator, catalog, checkout_state, quantity, name):
    result = orchestrator.checkout([{"product_id": catalog[name], "quantity": quantity}], "bdd@example.com")
    checkout_state["order_id"] = result.order_id


@given(parsers.cfparse('the checkout session completed with payment "{payment_intent_id}"'))
@when(parsers.cfparse('the checkout session completes with payment "{payment_intent_id}"'))
def _completed(deliver, checkout_state, payment_intent_id):
    deliver(
        "checkout.session.completed",
        {"metadata": {"orderId": checkout_state["order_id"]}, "payment_intent": payment_intent_id},
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the checkout session expires")
def _expired(deliver, checkout_state):
    deliver("checkout.session.expired", {"metadata": {"orderId": checkout_state["order_id"]}})


@when(parsers.cfparse('the charge for payment "{payment_intent_id}" is refunded'))
def _refunded(deliver, payment_intent_id):
    deliver("charge.refunded", {"payment_intent": payment_intent_id})


@when(parsers.cfparse('a customer tries to check out {quantity:d} of "{name}"'))
def _try_checkout(orchestrator, catalog, checkout_state, quantity, name):
    try:
        orchestrator.checkout([{"product_id": catalog[name], "quantity": quantity}], "bdd@example.com")
    except ValidationError as exc:
        checkout_state["error"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
def _order(checkout_state):
    return current_domain.repository_for(Order).get(checkout_state["order_id"])


@then(parsers.cfparse('the order status is "{status}"'))
def _order_status(checkout_state, status):
    assert _order(checkout_state).status == status


@then(parsers.cfparse("the order total is {total:d}"))
def _order_total(checkout_state, total):
    assert _order(checkout_state).total_amount == total


@then(parsers.cfparse("the order has {count:d} line priced at {unit_price:d}"))
def _order_lines(checkout_state, count, unit_price):
    items = _order(checkout_state).items
    assert len(items) == count
    assert all(item.unit_price == unit_price for item in items)


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def _stock(catalog, name, stock):
    assert current_domain.repository_for(Product).get(catalog[name]).stock == stock


@then(parsers.cfparse('the checkout is refused with "{message}"'))
def _refused(checkout_state, message):
    assert "error" in checkout_state, "Checkout was not refused"
    assert message in checkout_state["error"].messages["items"]
