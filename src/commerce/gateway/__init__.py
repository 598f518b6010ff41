"""Payment gateway factory.

``build_gateway`` picks the adapter named in the settings:
- FakeGateway for development, tests and load tests
- StripeGateway for production
"""

from commerce.config import StoreSettings
from commerce.gateway.fake_adapter import FakeGateway
from commerce.gateway.port import PaymentGateway
from commerce.gateway.stripe_adapter import StripeGateway


def build_gateway(settings: StoreSettings) -> PaymentGateway:
    if settings.payment_gateway == "stripe":
        if not settings.stripe_secret_key:
            raise ValueError("PAYMENT_GATEWAY=stripe requires STRIPE_SECRET_KEY")
        return StripeGateway(api_key=settings.stripe_secret_key, webhook_secret=settings.stripe_webhook_secret)

    if settings.payment_gateway == "fake":
        if settings.is_production:
            raise ValueError("The fake payment gateway cannot be used in production")
        return FakeGateway(webhook_secret=settings.stripe_webhook_secret)

    raise ValueError(f"Unknown payment gateway: {settings.payment_gateway!r}")
