"""Shopping Cart aggregate — the per-user working set of intended purchases.

Each user owns exactly one cart. The cart is created lazily on first access,
emptied after checkout, and never deleted.
"""

from datetime import UTC, datetime

from protean import atomic_change
from protean.fields import DateTime, HasMany, Identifier, Integer

from shared.domain import storefront


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.aggregate
class ShoppingCart:
    user_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id, items=(), created_at=None, updated_at=None):
        """Build a cart; ``items`` are ``(product_id, quantity)`` pairs in cart order."""
        now = datetime.now(UTC)
        cart = cls(user_id=user_id, created_at=created_at or now, updated_at=updated_at or now)
        with atomic_change(cart):
            for product_id, quantity in items:
                cart.add_items(CartItem(product_id=product_id, quantity=quantity))
        return cart

    def find_item(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def quantity_of(self, product_id) -> int:
        item = self.find_item(product_id)
        return item.quantity if item else 0

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id) -> None:
        """Add one unit of a product, incrementing an existing entry."""
        existing = self.find_item(product_id)
        if existing:
            existing.quantity += 1
        else:
            self.add_items(CartItem(product_id=product_id, quantity=1))
        self.updated_at = datetime.now(UTC)

    def remove_item(self, product_id) -> bool:
        """Drop a product's entry. Returns False when it was not in the cart."""
        item = self.find_item(product_id)
        if item is None:
            return False
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        return True

    def clear(self) -> None:
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)
