"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the API's request schemas and the
domain's validation rules (EmailAddress VO, positive integer prices).
Webhook payloads mirror the provider's event envelope and are signed the way
the fake payment gateway verifies them.
"""

import hashlib
import hmac
import json
import os
import random
import uuid

from faker import Faker

fake = Faker()

WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET", "whsec_fake")


def valid_email() -> str:
    """Generate emails that pass EmailAddress VO validation.

    Rules: exactly one @, no whitespace, domain with a dot,
    no leading/trailing dots, no consecutive dots.
    """
    local = fake.user_name()[:20]
    domain = fake.free_email_domain()
    return f"{local}.{uuid.uuid4().hex[:4]}@{domain}"


# ---------- Catalog ----------


def product_data(stock: int | None = None) -> dict:
    """Generate a CreateProductRequest payload. Prices are in cents."""
    return {
        "name": f"{fake.color_name()} {fake.word().title()} {uuid.uuid4().hex[:4]}"[:255],
        "description": fake.sentence(nb_words=10),
        "price": random.randint(199, 19999),
        "currency": "usd",
        "stock": stock if stock is not None else random.randint(50, 500),
        "image_url": fake.image_url(),
    }


# ---------- Checkout ----------


def checkout_data(product_ids: list[str]) -> dict:
    """Generate a CheckoutRequest for one to three of the given products."""
    chosen = random.sample(product_ids, k=min(len(product_ids), random.randint(1, 3)))
    return {
        "items": [{"productId": pid, "quantity": random.randint(1, 3)} for pid in chosen],
        "customerEmail": valid_email(),
    }


# ---------- Webhooks ----------


def _event(event_type: str, obj: dict) -> bytes:
    return json.dumps(
        {
            "id": f"evt_lt_{uuid.uuid4().hex[:16]}",
            "type": event_type,
            "data": {"object": obj},
        }
    ).encode()


def session_completed_event(order_id: str, payment_intent_id: str) -> bytes:
    return _event(
        "checkout.session.completed",
        {"metadata": {"orderId": order_id}, "payment_intent": payment_intent_id},
    )


def session_expired_event(order_id: str) -> bytes:
    return _event("checkout.session.expired", {"metadata": {"orderId": order_id}})


def charge_refunded_event(payment_intent_id: str) -> bytes:
    return _event("charge.refunded", {"payment_intent": payment_intent_id})


def payment_intent_id() -> str:
    return f"pi_lt_{uuid.uuid4().hex[:20]}"


def sign(payload: bytes) -> str:
    """HMAC-SHA256 signature accepted by the fake payment gateway."""
    return hmac.new(WEBHOOK_SECRET.encode(), payload, hashlib.sha256).hexdigest()
