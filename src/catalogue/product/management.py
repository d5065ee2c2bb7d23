"""Catalog operations — public browsing and seller (admin) product management."""

import math
from dataclasses import dataclass

import structlog

from catalogue.product.product import Product
from catalogue.product.repository import ProductRepository
from identity.principal import AuthenticatedUser
from shared.money import to_amount

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ProductPage:
    items: list[Product]
    total: int
    page: int
    page_size: int

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.page_size))

    @property
    def has_next_page(self) -> bool:
        return self.page * self.page_size < self.total

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1


class CatalogService:
    def __init__(self, products: ProductRepository, currency: str = "usd") -> None:
        self.products = products
        self.currency = currency

    # -------------------------------------------------------------------
    # Browsing
    # -------------------------------------------------------------------
    def list_products(self, page: int, page_size: int) -> ProductPage:
        page = max(1, page)
        page_size = max(1, page_size)
        items, total = self.products.page(skip=(page - 1) * page_size, limit=page_size)
        return ProductPage(items=items, total=total, page=page, page_size=page_size)

    def get_product(self, product_id: str) -> Product:
        return self.products.get(product_id)

    # -------------------------------------------------------------------
    # Seller management
    # -------------------------------------------------------------------
    def create_product(self, user: AuthenticatedUser, title, price, description="", image_url="") -> Product:
        product = Product.create(
            user_id=user.user_id,
            title=title,
            price=to_amount(price, self.currency),
            description=description,
            image_url=image_url,
        )
        self.products.add(product)
        logger.info("Product created", product_id=str(product.id), user_id=user.user_id)
        return product

    def update_product(self, user: AuthenticatedUser, product_id: str, **details) -> Product:
        product = self.products.get(product_id)
        product.assert_owned_by(user.user_id)

        if details.get("price") is not None:
            details["price"] = to_amount(details["price"], self.currency)
        product.update_details(**details)
        self.products.add(product)
        logger.info("Product updated", product_id=product_id, user_id=user.user_id)
        return product

    def delete_product(self, user: AuthenticatedUser, product_id: str) -> None:
        product = self.products.get(product_id)
        product.assert_owned_by(user.user_id)

        self.products.delete(product_id)
        logger.info("Product deleted", product_id=product_id, user_id=user.user_id)

    def list_seller_products(self, user: AuthenticatedUser) -> list[Product]:
        return self.products.list_by_owner(user.user_id)
