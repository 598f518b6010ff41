import json
from uuid import uuid4

import pytest
from commerce.checkout.orchestrator import CheckoutOrchestrator
from commerce.config import StoreSettings
from commerce.gateway.fake_adapter import FakeGateway
from commerce.payment.reconciler import WebhookReconciler
from protean import current_domain
from protean.integrations.pytest import DomainFixture

WEBHOOK_SECRET = "whsec_test"


@pytest.fixture(scope="session")
def commerce_bed():
    from commerce.domain import commerce

    bed = DomainFixture(commerce)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(commerce_bed):
    with commerce_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------
@pytest.fixture()
def settings():
    return StoreSettings(
        environment="test",
        stripe_webhook_secret=WEBHOOK_SECRET,
        frontend_url="https://shop.example.com",
        payment_gateway="fake",
    )


@pytest.fixture()
def gateway():
    return FakeGateway(webhook_secret=WEBHOOK_SECRET)


@pytest.fixture()
def orchestrator(gateway, settings):
    return CheckoutOrchestrator(gateway, settings)


@pytest.fixture()
def reconciler(gateway):
    return WebhookReconciler(gateway)


# ---------------------------------------------------------------------------
# Data builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def create_product():
    """Persist a product straight through the repository."""
    from commerce.product.product import Product

    def _create(name=None, price=500, stock=10, currency="usd", active=True, description=None):
        product = Product.create(
            name=name or f"Product {uuid4().hex[:6]}",
            price=price,
            stock=stock,
            currency=currency,
            description=description,
        )
        if not active:
            product.update(active=False)
        current_domain.repository_for(Product).add(product)
        return product

    return _create


@pytest.fixture()
def event_payload():
    """Build a raw provider event body."""

    def _build(event_type, obj):
        return json.dumps(
            {
                "id": f"evt_{uuid4().hex[:12]}",
                "type": event_type,
                "data": {"object": obj},
            }
        ).encode()

    return _build


@pytest.fixture()
def deliver(reconciler, gateway, event_payload):
    """Deliver a correctly signed event to the reconciler."""

    def _deliver(event_type, obj):
        payload = event_payload(event_type, obj)
        return reconciler.reconcile(payload, gateway.sign(payload))

    return _deliver
