"""Repository for the Order aggregate."""

from commerce.domain import commerce
from commerce.order.order import Order


@commerce.repository(part_of=Order)
class OrderRepository:
    def find_by_payment_intent(self, payment_intent_id: str) -> list[Order]:
        """Every order paid through the given payment intent."""
        return self._dao.query.filter(payment_intent_id=payment_intent_id).all().items
