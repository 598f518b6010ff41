"""Read-side access to the catalog."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from commerce.exceptions import NotFoundError
from commerce.product.product import Product


def product_view(product: Product) -> dict:
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "currency": product.currency,
        "stock": product.stock,
        "active": product.active,
        "image_url": product.image_url,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


def list_active_products() -> list[dict]:
    return [product_view(p) for p in current_domain.repository_for(Product).find_active()]


def get_product(product_id: str, include_inactive: bool = False) -> dict:
    """Return one product; inactive products are hidden unless asked for."""
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise NotFoundError("Product not found") from None

    if not product.active and not include_inactive:
        raise NotFoundError("Product not found")
    return product_view(product)
