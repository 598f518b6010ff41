"""Application components shared by the storefront routes.

Components are built once per application and kept on ``app.state``; routes
reach them through FastAPI dependencies.
"""

from fastapi import FastAPI, Request

from commerce.checkout.orchestrator import CheckoutOrchestrator
from commerce.config import StoreSettings
from commerce.gateway import build_gateway
from commerce.gateway.port import PaymentGateway
from commerce.payment.reconciler import WebhookReconciler


def install_components(app: FastAPI, settings: StoreSettings, gateway: PaymentGateway | None = None) -> None:
    gateway = gateway or build_gateway(settings)
    app.state.settings = settings
    app.state.gateway = gateway
    app.state.checkout = CheckoutOrchestrator(gateway, settings)
    app.state.reconciler = WebhookReconciler(gateway)


def get_settings(request: Request) -> StoreSettings:
    return request.app.state.settings


def get_checkout(request: Request) -> CheckoutOrchestrator:
    return request.app.state.checkout


def get_reconciler(request: Request) -> WebhookReconciler:
    return request.app.state.reconciler
