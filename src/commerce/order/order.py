"""Order aggregate: a customer's purchase and its payment lifecycle.

State Machine:
    PENDING → PAID → REFUNDED
    PENDING → CANCELLED

REFUNDED and CANCELLED are terminal. Line items are snapshots of the product
price at checkout time and never change after the order is placed.
"""

from collections import Counter
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, ValueObject

from commerce.domain import commerce
from commerce.order.events import (
    OrderCancelled,
    OrderPaid,
    OrderPlaced,
    OrderRefunded,
    PaymentSessionAttached,
)


class OrderStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.REFUNDED},
    OrderStatus.REFUNDED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


@commerce.value_object(part_of="Order")
class EmailAddress:
    """Customer email, checked for basic structure."""

    address: String(required=True, max_length=254)

    @invariant.post
    def verify_email_address(self):
        email = self.address or ""
        invalid = ValidationError({"customer_email": [f"Invalid email address: {email!r}"]})

        if any(ch.isspace() for ch in email) or email.count("@") != 1:
            raise invalid

        local_part, domain_part = email.split("@", 1)
        if not local_part or local_part.startswith(".") or local_part.endswith("."):
            raise invalid
        if "." not in domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            raise invalid
        if ".." in email:
            raise invalid


@commerce.entity(part_of="Order")
class OrderItem:
    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)
    unit_price: Integer(required=True, min_value=1)

    @property
    def line_total(self) -> int:
        return self.quantity * self.unit_price


@commerce.aggregate
class Order:
    customer_email: ValueObject(EmailAddress, required=True)
    status: String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    total_amount: Integer(min_value=0, default=0)
    currency: String(required=True, max_length=3)
    payment_session_id: String(max_length=255)
    payment_intent_id: String(max_length=255)
    items: HasMany(OrderItem)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def total_must_match_line_items(self):
        if not self.items:
            return
        expected = sum(item.line_total for item in self.items)
        if self.total_amount != expected:
            raise ValidationError(
                {"total_amount": [f"Order total {self.total_amount} does not match line items ({expected})"]}
            )

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_email, currency, lines):
        """Create a PENDING order.

        Args:
            customer_email: Address the payment provider will bill.
            currency: Three-letter currency code shared by every line.
            lines: List of dicts with product_id, quantity and unit_price,
                   in cart order. Prices come from the catalog, never the client.
        """
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        order = cls(
            customer_email=EmailAddress(address=customer_email),
            currency=currency.lower(),
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        with atomic_change(order):
            for line in lines:
                order.add_items(
                    OrderItem(
                        product_id=line["product_id"],
                        quantity=line["quantity"],
                        unit_price=line["unit_price"],
                    )
                )
            order.total_amount = sum(line["quantity"] * line["unit_price"] for line in lines)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_email=customer_email,
                total_amount=order.total_amount,
                currency=order.currency,
                item_count=len(lines),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING.value

    @property
    def is_paid(self) -> bool:
        return self.status == OrderStatus.PAID.value

    def quantities_by_product(self) -> dict[str, int]:
        """Total quantity per product, summing repeated lines for the same product."""
        totals = Counter()
        for item in self.items:
            totals[str(item.product_id)] += item.quantity
        return dict(totals)

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: OrderStatus) -> None:
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def attach_payment_session(self, session_id: str) -> None:
        if not self.is_pending:
            raise ValidationError({"status": ["A payment session can only be attached to a pending order"]})

        self.payment_session_id = session_id
        self.updated_at = datetime.now(UTC)
        self.raise_(
            PaymentSessionAttached(
                order_id=str(self.id),
                payment_session_id=session_id,
            )
        )

    def mark_paid(self, payment_intent_id: str | None) -> None:
        self._assert_can_transition(OrderStatus.PAID)
        now = datetime.now(UTC)

        self.status = OrderStatus.PAID.value
        self.payment_intent_id = payment_intent_id
        self.updated_at = now
        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                payment_intent_id=payment_intent_id,
                total_amount=self.total_amount,
                currency=self.currency,
                paid_at=now,
            )
        )

    def cancel(self, reason: str) -> None:
        self._assert_can_transition(OrderStatus.CANCELLED)
        now = datetime.now(UTC)

        self.status = OrderStatus.CANCELLED.value
        self.updated_at = now
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                reason=reason,
                cancelled_at=now,
            )
        )

    def mark_refunded(self) -> None:
        self._assert_can_transition(OrderStatus.REFUNDED)
        now = datetime.now(UTC)

        self.status = OrderStatus.REFUNDED.value
        self.updated_at = now
        self.raise_(
            OrderRefunded(
                order_id=str(self.id),
                payment_intent_id=self.payment_intent_id,
                total_amount=self.total_amount,
                refunded_at=now,
            )
        )
