from decimal import Decimal

import pytest
from catalogue.product.product import Product


@pytest.fixture()
def make_product(stores):
    def _make(title="A Book", price="10.00", user_id="user-seller", description=""):
        product = Product.create(user_id=user_id, title=title, price=Decimal(price), description=description)
        stores.products.add(product)
        return product

    return _make
