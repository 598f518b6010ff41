"""Product creation: command and handler."""

from protean import handle
from protean.fields import Integer, String, Text
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.product.product import Product


@commerce.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    description: Text()
    price: Integer(required=True, min_value=1)
    currency: String(max_length=3)
    stock: Integer(min_value=0)
    image_url: String(max_length=1000)


@commerce.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            description=command.description,
            price=command.price,
            currency=command.currency,
            stock=command.stock,
            image_url=command.image_url,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)
