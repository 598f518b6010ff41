"""Payment gateway port (abstract interface).

The checkout orchestrator and the webhook reconciler only talk to this
contract, so the Stripe adapter and the in-process fake are interchangeable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from commerce.gateway.events import GatewayEvent


@dataclass(frozen=True)
class LineItem:
    """One priced line on a hosted checkout page. Amounts are minor units."""

    name: str
    unit_amount: int
    currency: str
    quantity: int
    description: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class CheckoutSession:
    """A hosted checkout session the customer is redirected to."""

    session_id: str
    url: str


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_checkout_session(
        self,
        line_items: list[LineItem],
        customer_email: str,
        metadata: dict[str, str],
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        """Create a hosted checkout session for the given lines."""
        ...

    @abstractmethod
    def construct_event(self, payload: bytes, signature: str) -> GatewayEvent:
        """Verify a webhook delivery and parse it.

        Raises ``AuthenticationError`` when the signature does not match the
        payload; nothing from an unverified payload is returned.
        """
        ...
