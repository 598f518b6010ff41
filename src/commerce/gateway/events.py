"""Verified gateway notifications as a closed set of event types.

``parse_event`` turns a provider payload into exactly one of the classes
below. Each knows which reconciliation command it calls for, so the webhook
path never branches on raw type strings.
"""

from dataclasses import dataclass

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
CHECKOUT_SESSION_EXPIRED = "checkout.session.expired"
CHARGE_REFUNDED = "charge.refunded"


@dataclass(frozen=True)
class GatewayEvent:
    event_id: str

    event_type = "unknown"

    def to_command(self):
        """The reconciliation command for this event, or ``None`` to ignore it."""
        return None


@dataclass(frozen=True)
class CheckoutSessionCompleted(GatewayEvent):
    order_id: str
    payment_intent_id: str | None

    event_type = CHECKOUT_SESSION_COMPLETED

    def to_command(self):
        from commerce.order.reconciliation import ConfirmOrderPayment

        return ConfirmOrderPayment(order_id=self.order_id, payment_intent_id=self.payment_intent_id)


@dataclass(frozen=True)
class CheckoutSessionExpired(GatewayEvent):
    order_id: str

    event_type = CHECKOUT_SESSION_EXPIRED

    def to_command(self):
        from commerce.order.reconciliation import CancelExpiredOrder

        return CancelExpiredOrder(order_id=self.order_id)


@dataclass(frozen=True)
class ChargeRefunded(GatewayEvent):
    payment_intent_id: str

    event_type = CHARGE_REFUNDED

    def to_command(self):
        from commerce.order.reconciliation import RefundOrderPayment

        return RefundOrderPayment(payment_intent_id=self.payment_intent_id)


@dataclass(frozen=True)
class UnhandledEvent(GatewayEvent):
    """Anything the store does not act on, including malformed known events."""

    raw_type: str
    reason: str = "unsupported event type"

    @property
    def event_type(self):
        return self.raw_type


def parse_event(payload: dict) -> GatewayEvent:
    """Map a provider event (``{"id", "type", "data": {"object": ...}}``) to a GatewayEvent."""
    event_id = str(payload.get("id") or "")
    event_type = payload.get("type") or ""
    obj = (payload.get("data") or {}).get("object") or {}
    metadata = obj.get("metadata") or {}

    if event_type == CHECKOUT_SESSION_COMPLETED:
        if not metadata.get("orderId"):
            return UnhandledEvent(event_id, event_type, reason="missing orderId metadata")
        return CheckoutSessionCompleted(event_id, metadata["orderId"], obj.get("payment_intent"))

    if event_type == CHECKOUT_SESSION_EXPIRED:
        if not metadata.get("orderId"):
            return UnhandledEvent(event_id, event_type, reason="missing orderId metadata")
        return CheckoutSessionExpired(event_id, metadata["orderId"])

    if event_type == CHARGE_REFUNDED:
        if not obj.get("payment_intent"):
            return UnhandledEvent(event_id, event_type, reason="missing payment_intent")
        return ChargeRefunded(event_id, obj["payment_intent"])

    return UnhandledEvent(event_id, event_type)
