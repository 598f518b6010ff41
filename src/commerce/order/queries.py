"""Order Query: read-only view of an order with its line items and products."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from commerce.exceptions import NotFoundError
from commerce.order.order import Order
from commerce.product.product import Product
from commerce.product.queries import product_view


class OrderQuery:
    def get(self, order_id: str) -> dict:
        try:
            order = current_domain.repository_for(Order).get(order_id)
        except ObjectNotFoundError:
            raise NotFoundError("Order not found") from None

        return {
            "id": str(order.id),
            "customer_email": order.customer_email.address,
            "status": order.status,
            "total_amount": order.total_amount,
            "currency": order.currency,
            "payment_session_id": order.payment_session_id,
            "payment_intent_id": order.payment_intent_id,
            "created_at": order.created_at,
            "updated_at": order.updated_at,
            "items": [self._item_view(item) for item in order.items],
        }

    def _item_view(self, item) -> dict:
        # Products are never deleted, but a missing one should not hide the order
        try:
            product = product_view(current_domain.repository_for(Product).get(item.product_id))
        except ObjectNotFoundError:
            product = None

        return {
            "id": str(item.id),
            "product_id": str(item.product_id),
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "product": product,
        }
