"""Product aggregate: a purchasable catalog item and its stock level.

Prices are integers in the currency's minor unit (cents for ``usd``). Stock is
adjusted only through ``decrement_stock`` / ``increment_stock`` so that every
change is validated and recorded as a ``StockAdjusted`` event.
"""

from datetime import datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Integer, String, Text

from commerce.domain import commerce

DEFAULT_CURRENCY = "usd"

# Fields an admin may change after creation
UPDATABLE_FIELDS = ("name", "description", "price", "currency", "stock", "image_url", "active")


@commerce.aggregate
class Product:
    """Product aggregate root."""

    name: String(required=True, max_length=255)
    description: Text()
    price: Integer(required=True, min_value=1)
    currency: String(max_length=3, min_length=3, default=DEFAULT_CURRENCY)
    stock: Integer(min_value=0, default=0)
    active: Boolean(default=True)
    image_url: String(max_length=1000)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @classmethod
    def create(cls, name, price, description=None, currency=None, stock=None, image_url=None):
        from commerce.product.events import ProductCreated

        now = datetime.now()
        product = cls(
            name=name,
            description=description,
            price=price,
            currency=(currency or DEFAULT_CURRENCY).lower(),
            stock=stock if stock is not None else 0,
            image_url=image_url,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                price=product.price,
                currency=product.currency,
                stock=product.stock,
                created_at=now,
            )
        )
        return product

    def update(self, **changes):
        """Apply a partial update. Only the supplied fields change."""
        from commerce.product.events import ProductUpdated

        unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in unknown})

        if "currency" in changes and changes["currency"]:
            changes["currency"] = changes["currency"].lower()

        for field_name, value in changes.items():
            setattr(self, field_name, value)
        self.updated_at = datetime.now()

        self.raise_(
            ProductUpdated(
                product_id=self.id,
                name=self.name,
                price=self.price,
                currency=self.currency,
                stock=self.stock,
                active=self.active,
                updated_at=self.updated_at,
            )
        )

    def decrement_stock(self, quantity: int, reason: str) -> None:
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if quantity > self.stock:
            raise ValidationError(
                {"stock": [f"Insufficient stock for product: {self.name} (have {self.stock}, need {quantity})"]}
            )
        self._adjust_stock(-quantity, reason)

    def increment_stock(self, quantity: int, reason: str) -> None:
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        self._adjust_stock(quantity, reason)

    def _adjust_stock(self, delta: int, reason: str) -> None:
        from commerce.product.events import StockAdjusted

        self.stock = self.stock + delta
        self.updated_at = datetime.now()
        self.raise_(
            StockAdjusted(
                product_id=self.id,
                delta=delta,
                stock=self.stock,
                reason=reason,
            )
        )
