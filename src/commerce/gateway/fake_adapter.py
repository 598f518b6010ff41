"""In-process payment gateway for development, tests and load tests.

Webhook deliveries are signed with an HMAC-SHA256 of the raw body using the
configured webhook secret, so the signature check is exercised end to end
without talking to a real provider. ``sign()`` produces valid signatures for
test clients.
"""

import hashlib
import hmac
import json
from uuid import uuid4

from commerce.exceptions import AuthenticationError
from commerce.gateway.events import GatewayEvent, parse_event
from commerce.gateway.port import CheckoutSession, LineItem, PaymentGateway

FAKE_CHECKOUT_HOST = "https://checkout.fake.local"


class FakeGatewayError(RuntimeError):
    """Raised when the fake is configured to fail session creation."""


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, webhook_secret: str = "whsec_fake") -> None:
        self.webhook_secret = webhook_secret or "whsec_fake"
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Gateway unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_checkout_session(
        self,
        line_items: list[LineItem],
        customer_email: str,
        metadata: dict[str, str],
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        self.calls.append(
            {
                "method": "create_checkout_session",
                "line_items": list(line_items),
                "customer_email": customer_email,
                "metadata": dict(metadata),
                "success_url": success_url,
                "cancel_url": cancel_url,
            }
        )

        if not self.should_succeed:
            raise FakeGatewayError(self.failure_reason)

        session_id = f"cs_fake_{uuid4().hex[:24]}"
        return CheckoutSession(session_id=session_id, url=f"{FAKE_CHECKOUT_HOST}/pay/{session_id}")

    def sign(self, payload: bytes) -> str:
        return hmac.new(self.webhook_secret.encode(), payload, hashlib.sha256).hexdigest()

    def construct_event(self, payload: bytes, signature: str) -> GatewayEvent:
        if not signature or not hmac.compare_digest(self.sign(payload), signature):
            raise AuthenticationError("Webhook signature verification failed: signature mismatch")

        try:
            body = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise AuthenticationError(f"Webhook signature verification failed: invalid payload ({exc})") from exc

        return parse_event(body)
