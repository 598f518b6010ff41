"""Partial product update: command and handler.

The command carries the changed fields as a JSON object so that "not
supplied" and "set to empty" stay distinguishable.
"""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.exceptions import NotFoundError
from commerce.product.product import Product


@commerce.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    changes: Text(required=True)


@commerce.command_handler(part_of=Product)
class UpdateProductHandler:
    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        try:
            product = repo.get(command.product_id)
        except ObjectNotFoundError:
            raise NotFoundError("Product not found") from None

        changes = json.loads(command.changes)
        if changes:
            product.update(**changes)
            repo.add(product)
        return str(product.id)
