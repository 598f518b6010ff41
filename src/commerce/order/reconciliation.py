"""Order reconciliation: applies confirmed payment outcomes to orders and stock.

Each command runs in its own Unit of Work, so an order's status change and the
stock movements it implies commit together or not at all.

Payment providers deliver notifications at least once and in any order. The
handlers therefore only act when the order is in the state the notification
expects and acknowledge everything else as a no-op:

    ConfirmOrderPayment  acts on PENDING orders (→ PAID, stock taken)
    CancelExpiredOrder   acts on PENDING orders (→ CANCELLED)
    RefundOrderPayment   acts on PAID orders    (→ REFUNDED, stock returned)
"""

from collections import Counter

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.order.order import Order
from commerce.product.product import Product

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class ConfirmOrderPayment:
    order_id: Identifier(required=True)
    payment_intent_id: String(max_length=255)


@commerce.command(part_of="Order")
class CancelExpiredOrder:
    order_id: Identifier(required=True)


@commerce.command(part_of="Order")
class RefundOrderPayment:
    payment_intent_id: String(required=True, max_length=255)


def _load_order(order_id):
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        logger.warning("order_not_found_for_payment_event", order_id=str(order_id))
        return None


def _move_stock(quantities: dict[str, int], reason: str, restock: bool) -> None:
    """Adjust each product once by its summed quantity."""
    repo = current_domain.repository_for(Product)
    for product_id, quantity in quantities.items():
        product = repo.get(product_id)
        if restock:
            product.increment_stock(quantity, reason=reason)
        else:
            product.decrement_stock(quantity, reason=reason)
        repo.add(product)


@commerce.command_handler(part_of=Order)
class OrderReconciliationHandler:
    @handle(ConfirmOrderPayment)
    def confirm_payment(self, command):
        order = _load_order(command.order_id)
        if order is None:
            return False

        if not order.is_pending:
            logger.info("payment_confirmation_skipped", order_id=str(order.id), status=order.status)
            return False

        order.mark_paid(command.payment_intent_id)
        try:
            _move_stock(order.quantities_by_product(), reason="order_paid", restock=False)
        except ValidationError as exc:
            # Paid but not fulfillable; needs a manual refund.
            logger.error(
                "order_oversold",
                order_id=str(order.id),
                payment_intent_id=command.payment_intent_id,
                errors=exc.messages,
            )
            raise
        current_domain.repository_for(Order).add(order)

        logger.info("order_paid", order_id=str(order.id), payment_intent_id=command.payment_intent_id)
        return True

    @handle(CancelExpiredOrder)
    def cancel_expired(self, command):
        order = _load_order(command.order_id)
        if order is None:
            return False

        if not order.is_pending:
            logger.info("expiry_skipped", order_id=str(order.id), status=order.status)
            return False

        order.cancel(reason="Checkout session expired")
        current_domain.repository_for(Order).add(order)

        logger.info("order_cancelled", order_id=str(order.id))
        return True

    @handle(RefundOrderPayment)
    def refund_payment(self, command):
        repo = current_domain.repository_for(Order)
        orders = repo.find_by_payment_intent(command.payment_intent_id)
        if not orders:
            logger.warning("no_orders_for_refund", payment_intent_id=command.payment_intent_id)
            return 0

        returned = Counter()
        refunded = []
        for order in orders:
            if not order.is_paid:
                logger.info("refund_skipped", order_id=str(order.id), status=order.status)
                continue
            order.mark_refunded()
            returned.update(order.quantities_by_product())
            refunded.append(order)

        if refunded:
            _move_stock(dict(returned), reason="order_refunded", restock=True)
            for order in refunded:
                repo.add(order)

        logger.info(
            "orders_refunded",
            payment_intent_id=command.payment_intent_id,
            refunded=[str(order.id) for order in refunded],
        )
        return len(refunded)
