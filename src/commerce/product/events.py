"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalog."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    price: Integer(required=True)
    currency: String(required=True)
    stock: Integer(required=True)
    created_at: DateTime(required=True)


@commerce.event(part_of="Product")
class ProductUpdated:
    """An admin changed one or more product attributes."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    price: Integer(required=True)
    currency: String(required=True)
    stock: Integer(required=True)
    active: Boolean()
    updated_at: DateTime(required=True)


@commerce.event(part_of="Product")
class StockAdjusted:
    """Stock moved because an order was paid or refunded."""

    __version__ = 1

    product_id: Identifier(required=True)
    delta: Integer(required=True)
    stock: Integer(required=True)
    reason: String(required=True, max_length=100)
