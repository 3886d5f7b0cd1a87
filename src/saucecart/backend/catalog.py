"""Fixed product catalog served by the mock API."""

from decimal import Decimal

from ..models import Product

CATALOG: tuple[Product, ...] = (
    Product(
        id="1",
        name="Sauce Labs Backpack",
        price="29.99",
        description="Backpack",
        image_url="/img/sauce-backpack.jpg",
    ),
    Product(
        id="2",
        name="Sauce Labs Bike Light",
        price="9.99",
        description="Bike Light",
        image_url="/img/sauce-bike-light.jpg",
    ),
)


def find_product(product_id: str) -> Product | None:
    """Look up a catalog product by id."""
    for product in CATALOG:
        if product.id == product_id:
            return product
    return None


def price_of(product_id: str) -> Decimal:
    """Catalog price of a product; ids outside the catalog cost nothing."""
    product = find_product(product_id)
    return Decimal(product.price) if product else Decimal("0")
