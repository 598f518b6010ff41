"""Order placement: commands and handler.

PlaceOrder validates the cart against the live catalog and records a PENDING
order in one Unit of Work: if any check fails nothing is written. The stock
check here is advisory; stock is only taken when the payment is confirmed.
"""

import json
from collections import Counter

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.exceptions import NotFoundError
from commerce.order.order import Order
from commerce.product.product import Product

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class PlaceOrder:
    customer_email: String(required=True, max_length=254)
    items: Text(required=True)  # JSON array of {product_id, quantity}


@commerce.command(part_of="Order")
class AttachPaymentSession:
    order_id: Identifier(required=True)
    payment_session_id: String(required=True, max_length=255)


def _parse_cart(raw_items: str) -> list[tuple[str, int]]:
    try:
        items = json.loads(raw_items)
    except (json.JSONDecodeError, TypeError):
        raise ValidationError({"items": ["Items must be a JSON array"]}) from None

    if not isinstance(items, list) or not items:
        raise ValidationError({"items": ["At least one item is required"]})

    cart = []
    for item in items:
        product_id = item.get("product_id") if isinstance(item, dict) else None
        quantity = item.get("quantity") if isinstance(item, dict) else None
        if not product_id or not isinstance(product_id, str):
            raise ValidationError({"items": ["Each item needs a product_id"]})
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError({"items": ["Each item needs a quantity of at least 1"]})
        cart.append((product_id, quantity))
    return cart


@commerce.command_handler(part_of=Order)
class OrderPlacementHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart = _parse_cart(command.items)

        requested = Counter()
        for product_id, quantity in cart:
            requested[product_id] += quantity

        products = current_domain.repository_for(Product).find_active_by_ids(requested.keys())
        if len(products) != len(requested):
            raise ValidationError({"items": ["One or more products not found or inactive"]})

        catalog = {str(product.id): product for product in products}
        for product_id, quantity in requested.items():
            product = catalog[product_id]
            if product.stock < quantity:
                raise ValidationError({"items": [f"Insufficient stock for product: {product.name}"]})

        currencies = {product.currency for product in products}
        if len(currencies) > 1:
            raise ValidationError({"items": ["All items must be priced in the same currency"]})

        lines = [
            {"product_id": product_id, "quantity": quantity, "unit_price": catalog[product_id].price}
            for product_id, quantity in cart
        ]
        order = Order.place(
            customer_email=command.customer_email,
            currency=catalog[cart[0][0]].currency,
            lines=lines,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            total_amount=order.total_amount,
            currency=order.currency,
            lines=len(lines),
        )
        return str(order.id)

    @handle(AttachPaymentSession)
    def attach_payment_session(self, command):
        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError:
            raise NotFoundError("Order not found") from None

        order.attach_payment_session(command.payment_session_id)
        repo.add(order)
