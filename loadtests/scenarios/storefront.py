"""Storefront load test scenarios.

Shoppers browse the catalog; buyers run the full checkout journey against the
fake payment gateway, with webhook deliveries (including duplicates) signed
the way the gateway verifies them.
"""

import os
import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    charge_refunded_event,
    checkout_data,
    payment_intent_id,
    product_data,
    session_completed_event,
    session_expired_event,
    sign,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CatalogState, CheckoutState

API = "/api/ecommerce"
ADMIN_HEADERS = {"Authorization": f"Bearer {os.getenv('ADMIN_API_KEY', '')}"}


def _seed_products(client, state: CatalogState, count: int = 3) -> None:
    for _ in range(count):
        with client.post(
            f"{API}/products",
            json=product_data(stock=10_000),
            headers=ADMIN_HEADERS,
            catch_response=True,
            name="POST /products",
        ) as resp:
            if resp.status_code == 201:
                state.product_ids.append(resp.json()["product"]["id"])
            else:
                resp.failure(f"Create product failed: {resp.status_code}: {extract_error_detail(resp)}")


def _deliver(client, payload: bytes, name: str):
    return client.post(
        f"{API}/webhook",
        data=payload,
        headers={"Stripe-Signature": sign(payload), "Content-Type": "application/json"},
        catch_response=True,
        name=name,
    )


class CheckoutJourney(SequentialTaskSet):
    """Checkout -> session completed (delivered twice) -> read order -> maybe refund.

    The duplicate delivery must be acknowledged without taking stock twice.
    """

    def on_start(self):
        self.catalog = CatalogState()
        self.state = CheckoutState()
        _seed_products(self.client, self.catalog)

    @task
    def checkout(self):
        if not self.catalog.product_ids:
            self.interrupt()
        with self.client.post(
            f"{API}/checkout",
            json=checkout_data(self.catalog.product_ids),
            catch_response=True,
            name="POST /checkout",
        ) as resp:
            if resp.status_code == 200:
                body = resp.json()
                self.state.order_id = body["orderId"]
                self.state.session_id = body["sessionId"]
            else:
                resp.failure(f"Checkout failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def session_completed(self):
        self.state.payment_intent_id = payment_intent_id()
        payload = session_completed_event(self.state.order_id, self.state.payment_intent_id)
        for name in ("POST /webhook (completed)", "POST /webhook (completed, redelivery)"):
            with _deliver(self.client, payload, name) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Webhook failed: {resp.status_code}: {extract_error_detail(resp)}")
                    self.interrupt()
        self.state.current_status = "PAID"

    @task
    def read_order(self):
        with self.client.get(
            f"{API}/orders/{self.state.order_id}",
            catch_response=True,
            name="GET /orders/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Get order failed: {resp.status_code}: {extract_error_detail(resp)}")
            elif resp.json()["order"]["status"] != self.state.current_status:
                resp.failure(f"Expected {self.state.current_status}, got {resp.json()['order']['status']}")

    @task
    def maybe_refund(self):
        if random.random() < 0.2:
            with _deliver(self.client, charge_refunded_event(self.state.payment_intent_id), "POST /webhook (refund)") as resp:
                if resp.status_code == 200:
                    self.state.current_status = "REFUNDED"
                else:
                    resp.failure(f"Refund webhook failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class AbandonedCheckoutJourney(SequentialTaskSet):
    """Checkout -> session expired -> read order (CANCELLED)."""

    def on_start(self):
        self.catalog = CatalogState()
        self.state = CheckoutState()
        _seed_products(self.client, self.catalog, count=1)

    @task
    def checkout(self):
        if not self.catalog.product_ids:
            self.interrupt()
        with self.client.post(
            f"{API}/checkout",
            json=checkout_data(self.catalog.product_ids),
            catch_response=True,
            name="POST /checkout",
        ) as resp:
            if resp.status_code == 200:
                self.state.order_id = resp.json()["orderId"]
            else:
                resp.failure(f"Checkout failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def session_expired(self):
        with _deliver(self.client, session_expired_event(self.state.order_id), "POST /webhook (expired)") as resp:
            if resp.status_code == 200:
                self.state.current_status = "CANCELLED"
            else:
                resp.failure(f"Expiry webhook failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class ShopperUser(HttpUser):
    """Browses the catalog: list, then look at a few products."""

    wait_time = between(0.5, 2.0)
    weight = 6

    @task(3)
    def browse(self):
        with self.client.get(f"{API}/products", catch_response=True, name="GET /products") as resp:
            if resp.status_code != 200:
                resp.failure(f"List products failed: {resp.status_code}: {extract_error_detail(resp)}")
                return
            products = resp.json()["products"]
        for product in random.sample(products, k=min(len(products), 2)):
            self.client.get(f"{API}/products/{product['id']}", name="GET /products/{id}")

    @task(1)
    def health(self):
        self.client.get("/health", name="GET /health")


class BuyerUser(HttpUser):
    """Completes or abandons checkouts."""

    wait_time = between(1.0, 3.0)
    weight = 3
    tasks = {CheckoutJourney: 4, AbandonedCheckoutJourney: 1}
