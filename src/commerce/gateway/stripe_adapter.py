"""Stripe payment gateway adapter.

Creates hosted Checkout Sessions and verifies webhook deliveries with the
endpoint's signing secret via ``stripe.Webhook.construct_event``.
"""

import json

import stripe
import structlog

from commerce.exceptions import AuthenticationError
from commerce.gateway.events import GatewayEvent, parse_event
from commerce.gateway.port import CheckoutSession, LineItem, PaymentGateway

logger = structlog.get_logger(__name__)


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str, webhook_secret: str) -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    @staticmethod
    def _line_item(item: LineItem) -> dict:
        product_data = {"name": item.name}
        if item.description:
            product_data["description"] = item.description
        if item.image_url:
            product_data["images"] = [item.image_url]

        return {
            "price_data": {
                "currency": item.currency,
                "product_data": product_data,
                "unit_amount": item.unit_amount,
            },
            "quantity": item.quantity,
        }

    def create_checkout_session(
        self,
        line_items: list[LineItem],
        customer_email: str,
        metadata: dict[str, str],
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                mode="payment",
                payment_method_types=["card"],
                customer_email=customer_email,
                line_items=[self._line_item(item) for item in line_items],
                metadata=metadata,
                success_url=success_url,
                cancel_url=cancel_url,
                idempotency_key=f"checkout_{metadata.get('orderId', '')}",
            )
        except stripe.StripeError as e:
            logger.error("stripe_checkout_failed", error=str(e), error_type=type(e).__name__)
            raise

        logger.info("stripe_checkout_created", stripe_session_id=session.id)
        return CheckoutSession(session_id=session.id, url=session.url)

    def construct_event(self, payload: bytes, signature: str) -> GatewayEvent:
        try:
            stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as e:
            logger.warning("webhook_signature_invalid", error=str(e))
            raise AuthenticationError(f"Webhook signature verification failed: {e}") from e

        return parse_event(json.loads(payload))
