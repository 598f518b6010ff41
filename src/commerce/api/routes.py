"""FastAPI endpoints for the storefront: catalog, checkout, webhook and orders."""

import json

from fastapi import APIRouter, Depends, Header, Request
from protean.utils.globals import current_domain
from starlette.concurrency import run_in_threadpool

from commerce.api.auth import require_admin_key
from commerce.api.dependencies import get_checkout, get_reconciler
from commerce.api.schemas import (
    CheckoutRequest,
    CheckoutResponse,
    CreateProductRequest,
    OrderEnvelope,
    ProductEnvelope,
    ProductListResponse,
    UpdateProductRequest,
    WebhookResponse,
)
from commerce.checkout.orchestrator import CheckoutOrchestrator
from commerce.domain import commerce
from commerce.order.queries import OrderQuery
from commerce.payment.reconciler import WebhookReconciler
from commerce.product.creation import CreateProduct
from commerce.product.details import UpdateProduct
from commerce.product.queries import get_product, list_active_products

router = APIRouter(prefix="/api/ecommerce", tags=["ecommerce"])


# --- Catalog endpoints ---


@router.get("/products", response_model=ProductListResponse)
async def list_products() -> ProductListResponse:
    return ProductListResponse(products=list_active_products())


@router.get("/products/{product_id}", response_model=ProductEnvelope)
async def read_product(product_id: str) -> ProductEnvelope:
    return ProductEnvelope(product=get_product(product_id))


@router.post(
    "/products",
    status_code=201,
    response_model=ProductEnvelope,
    dependencies=[Depends(require_admin_key)],
)
async def create_product(body: CreateProductRequest) -> ProductEnvelope:
    command = CreateProduct(
        name=body.name,
        description=body.description,
        price=body.price,
        currency=body.currency,
        stock=body.stock,
        image_url=body.image_url,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ProductEnvelope(product=get_product(product_id, include_inactive=True))


@router.patch(
    "/products/{product_id}",
    response_model=ProductEnvelope,
    dependencies=[Depends(require_admin_key)],
)
async def update_product(product_id: str, body: UpdateProductRequest) -> ProductEnvelope:
    command = UpdateProduct(
        product_id=product_id,
        changes=json.dumps(body.model_dump(exclude_unset=True)),
    )
    current_domain.process(command, asynchronous=False)
    return ProductEnvelope(product=get_product(product_id, include_inactive=True))


# --- Checkout and payment notifications ---


def _in_domain(func, *args, **kwargs):
    """Run ``func`` inside a fresh commerce domain context on the current thread."""
    with commerce.domain_context():
        return func(*args, **kwargs)


@router.post("/checkout", response_model=CheckoutResponse, response_model_by_alias=True)
async def create_checkout_session(
    body: CheckoutRequest,
    checkout: CheckoutOrchestrator = Depends(get_checkout),
) -> CheckoutResponse:
    # The gateway call is blocking network I/O; keep it off the event loop.
    result = await run_in_threadpool(
        _in_domain,
        checkout.checkout,
        items=[item.model_dump() for item in body.items],
        customer_email=body.customer_email,
    )
    return CheckoutResponse(url=result.url, session_id=result.session_id, order_id=result.order_id)


@router.post("/webhook", response_model=WebhookResponse)
async def handle_webhook(
    request: Request,
    stripe_signature: str = Header(default=""),
    reconciler: WebhookReconciler = Depends(get_reconciler),
) -> WebhookResponse:
    """Receive a payment provider notification.

    The raw body is passed through untouched: the signature covers the exact
    bytes the provider sent.
    """
    payload = await request.body()
    await run_in_threadpool(_in_domain, reconciler.reconcile, payload, stripe_signature)
    return WebhookResponse(received=True)


# --- Orders ---


@router.get("/orders/{order_id}", response_model=OrderEnvelope)
async def read_order(order_id: str) -> OrderEnvelope:
    return OrderEnvelope(order=OrderQuery().get(order_id))
