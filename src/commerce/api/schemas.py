"""Pydantic request/response schemas for the storefront API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands. Checkout lines deliberately have no price field:
any price a client sends is dropped before it reaches the domain.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Product schemas
# ---------------------------------------------------------------------------
class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: int
    currency: str
    stock: int
    active: bool
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductListResponse(BaseModel):
    products: list[ProductResponse]


class ProductEnvelope(BaseModel):
    product: ProductResponse


class CreateProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    price: int = Field(ge=1, description="Unit price in minor currency units")
    currency: str = Field(default="usd", min_length=3, max_length=3)
    stock: int = Field(default=0, ge=0)
    image_url: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Field Notes Journal",
                    "description": "Dot grid, 48 pages",
                    "price": 1299,
                    "currency": "usd",
                    "stock": 25,
                    "image_url": "https://cdn.example.com/journal.png",
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    """Partial update; only fields present in the request body change."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: int | None = Field(default=None, ge=1)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    stock: int | None = Field(default=None, ge=0)
    image_url: str | None = None
    active: bool | None = None


# ---------------------------------------------------------------------------
# Checkout schemas
# ---------------------------------------------------------------------------
class CamelModel(BaseModel):
    """Checkout payloads travel in camelCase; snake_case names are accepted too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CheckoutItem(CamelModel):
    product_id: str = Field(min_length=1)
    quantity: int = Field(ge=1)


class CheckoutRequest(CamelModel):
    items: list[CheckoutItem] = Field(min_length=1)
    customer_email: EmailStr

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "items": [{"productId": "3f0c6d1e-0000-4000-8000-000000000001", "quantity": 2}],
                    "customerEmail": "ada@example.com",
                }
            ]
        },
    )


class CheckoutResponse(CamelModel):
    url: str
    session_id: str
    order_id: str


class WebhookResponse(BaseModel):
    received: bool = True


# ---------------------------------------------------------------------------
# Order schemas
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    quantity: int
    unit_price: int
    product: ProductResponse | None = None


class OrderResponse(BaseModel):
    id: str
    customer_email: str
    status: str
    total_amount: int
    currency: str
    payment_session_id: str | None = None
    payment_intent_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    items: list[OrderItemResponse]


class OrderEnvelope(BaseModel):
    order: OrderResponse
