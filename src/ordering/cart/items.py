"""Cart item management — add, remove, clear and view a user's cart."""

import structlog

from catalogue.product.repository import ProductRepository
from identity.principal import AuthenticatedUser
from ordering.cart.contents import CartContents, resolve_contents
from ordering.cart.repository import CartRepository

logger = structlog.get_logger(__name__)


class CartService:
    def __init__(self, carts: CartRepository, products: ProductRepository, currency: str = "usd") -> None:
        self.carts = carts
        self.products = products
        self.currency = currency

    def add_product(self, user: AuthenticatedUser, product_id: str) -> CartContents:
        # Raises NotFound for unknown products before the cart is touched
        self.products.get(product_id)

        cart = self.carts.add_product(user.user_id, product_id)
        logger.info(
            "Product added to cart",
            user_id=user.user_id,
            product_id=product_id,
            quantity=cart.quantity_of(product_id),
        )
        return resolve_contents(cart, self.products, self.currency)

    def remove_product(self, user: AuthenticatedUser, product_id: str) -> CartContents:
        removed = self.carts.remove_product(user.user_id, product_id)
        if removed:
            logger.info("Product removed from cart", user_id=user.user_id, product_id=product_id)
        else:
            logger.debug("Product not in cart, nothing removed", user_id=user.user_id, product_id=product_id)
        return self.view(user)

    def clear(self, user: AuthenticatedUser) -> None:
        self.carts.clear(user.user_id)
        logger.info("Cart cleared", user_id=user.user_id)

    def view(self, user: AuthenticatedUser) -> CartContents:
        cart = self.carts.get_or_create(user.user_id)
        return resolve_contents(cart, self.products, self.currency)
