"""Checkout orchestration: from a cart to a hosted payment page.

    validate cart + write PENDING order   (PlaceOrder, one Unit of Work)
    create hosted checkout session        (payment gateway)
    record the session on the order       (AttachPaymentSession)

If the gateway call fails the PENDING order stays behind without a session
reference. It never reaches PAID, because only a completed checkout session
for that order id can confirm it.
"""

import json
from dataclasses import dataclass

import structlog
from protean.utils.globals import current_domain

from commerce.config import StoreSettings
from commerce.exceptions import ProcessingError
from commerce.gateway.port import LineItem, PaymentGateway
from commerce.order.order import Order
from commerce.order.placement import AttachPaymentSession, PlaceOrder
from commerce.product.product import Product

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    url: str
    session_id: str
    order_id: str


class CheckoutOrchestrator:
    def __init__(self, gateway: PaymentGateway, settings: StoreSettings) -> None:
        self.gateway = gateway
        self.settings = settings

    def checkout(self, items: list[dict], customer_email: str) -> CheckoutResult:
        """Place a PENDING order for ``items`` and open a checkout session for it.

        Raises ``ValidationError`` for an unusable cart (nothing is written) and
        ``ProcessingError`` when the gateway cannot create a session.
        """
        order_id = current_domain.process(
            PlaceOrder(customer_email=customer_email, items=json.dumps(items)),
            asynchronous=False,
        )

        line_items = self._line_items(order_id)
        try:
            session = self.gateway.create_checkout_session(
                line_items=line_items,
                customer_email=customer_email,
                metadata={"orderId": order_id},
                success_url=self.settings.success_url,
                cancel_url=self.settings.cancel_url,
            )
        except Exception as exc:
            logger.exception("checkout_session_failed", order_id=order_id)
            raise ProcessingError("Failed to create checkout session") from exc

        current_domain.process(
            AttachPaymentSession(order_id=order_id, payment_session_id=session.session_id),
            asynchronous=False,
        )

        logger.info("checkout_session_created", order_id=order_id, session_id=session.session_id)
        return CheckoutResult(url=session.url, session_id=session.session_id, order_id=order_id)

    def _line_items(self, order_id: str) -> list[LineItem]:
        """Gateway line items from the stored order, so prices are the snapshots."""
        order = current_domain.repository_for(Order).get(order_id)
        products = current_domain.repository_for(Product)

        line_items = []
        for item in order.items:
            product = products.get(item.product_id)
            line_items.append(
                LineItem(
                    name=product.name,
                    description=product.description,
                    image_url=product.image_url,
                    unit_amount=item.unit_price,
                    currency=order.currency,
                    quantity=item.quantity,
                )
            )
        return line_items
