"""Repository for the Product aggregate."""

from protean.exceptions import ObjectNotFoundError

from commerce.domain import commerce
from commerce.product.product import Product


@commerce.repository(part_of=Product)
class ProductRepository:
    def find_active(self) -> list[Product]:
        """Active products, newest first."""
        products = self._dao.query.filter(active=True).all().items
        return sorted(products, key=lambda product: product.created_at, reverse=True)

    def find_active_by_ids(self, product_ids) -> list[Product]:
        """Load each distinct id once, dropping unknown and inactive products.

        Callers compare the result length against the number of distinct ids
        they asked for to detect missing products.
        """
        found = []
        for product_id in dict.fromkeys(product_ids):
            try:
                product = self.get(product_id)
            except ObjectNotFoundError:
                continue
            if product.active:
                found.append(product)
        return found
