"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="Order")
class OrderPlaced:
    """A customer checked out and a PENDING order was recorded."""

    __version__ = 1

    order_id: Identifier(required=True)
    customer_email: String(required=True, max_length=254)
    total_amount: Integer(required=True)
    currency: String(required=True, max_length=3)
    item_count: Integer(required=True)
    placed_at: DateTime(required=True)


@commerce.event(part_of="Order")
class PaymentSessionAttached:
    """The hosted checkout session for the order was created."""

    __version__ = 1

    order_id: Identifier(required=True)
    payment_session_id: String(required=True, max_length=255)


@commerce.event(part_of="Order")
class OrderPaid:
    """The payment provider confirmed the checkout; stock was taken."""

    __version__ = 1

    order_id: Identifier(required=True)
    payment_intent_id: String(max_length=255)
    total_amount: Integer(required=True)
    currency: String(required=True, max_length=3)
    paid_at: DateTime(required=True)


@commerce.event(part_of="Order")
class OrderCancelled:
    """The checkout session expired before the customer paid."""

    __version__ = 1

    order_id: Identifier(required=True)
    reason: String(required=True, max_length=255)
    cancelled_at: DateTime(required=True)


@commerce.event(part_of="Order")
class OrderRefunded:
    """The charge was refunded; stock was returned."""

    __version__ = 1

    order_id: Identifier(required=True)
    payment_intent_id: String(max_length=255)
    total_amount: Integer(required=True)
    refunded_at: DateTime(required=True)
