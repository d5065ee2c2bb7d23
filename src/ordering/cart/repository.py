"""Cart persistence.

Every mutation is a single atomic operation on the user's cart, so two
concurrent requests for the same user can never lose an increment: the memory
store serializes them under its lock, MongoDB applies ``$inc``/``$push``/
``$pull`` updates server-side.
"""

import threading
from abc import ABC, abstractmethod
from datetime import UTC, datetime

from protean.utils.globals import current_domain
from pymongo import ReturnDocument
from pymongo.database import Database

from ordering.cart.cart import ShoppingCart
from shared.errors import StoreUnavailable, store_operation

# Rounds of $inc/$push before add_product gives up on a contended cart
MAX_ADD_ATTEMPTS = 5


class CartRepository(ABC):
    @abstractmethod
    def get_or_create(self, user_id: str) -> ShoppingCart: ...

    @abstractmethod
    def add_product(self, user_id: str, product_id: str) -> ShoppingCart:
        """Increment the product's quantity, appending it with quantity 1 when absent."""

    @abstractmethod
    def remove_product(self, user_id: str, product_id: str) -> bool:
        """Remove the product's entry; False when it was not present."""

    @abstractmethod
    def clear(self, user_id: str) -> None: ...


class MemoryCartRepository(CartRepository):
    """Carts in the domain's memory provider, one lock for all read-modify-write cycles."""

    def __init__(self) -> None:
        self._lock = threading.RLock()

    @property
    def repo(self):
        return current_domain.repository_for(ShoppingCart)

    def _load_or_new(self, user_id: str) -> ShoppingCart:
        carts = self.repo._dao.query.filter(user_id=user_id).all().items
        if carts:
            return carts[0]
        cart = ShoppingCart.create(user_id)
        self.repo.add(cart)
        return cart

    def get_or_create(self, user_id: str) -> ShoppingCart:
        with self._lock:
            return self._load_or_new(user_id)

    def add_product(self, user_id: str, product_id: str) -> ShoppingCart:
        with self._lock:
            cart = self._load_or_new(user_id)
            cart.add_item(product_id)
            self.repo.add(cart)
            return cart

    def remove_product(self, user_id: str, product_id: str) -> bool:
        with self._lock:
            cart = self._load_or_new(user_id)
            removed = cart.remove_item(product_id)
            if removed:
                self.repo.add(cart)
            return removed

    def clear(self, user_id: str) -> None:
        with self._lock:
            cart = self._load_or_new(user_id)
            cart.clear()
            self.repo.add(cart)


def _from_document(doc: dict) -> ShoppingCart:
    return ShoppingCart.create(
        doc["_id"],
        items=[(item["product_id"], item["quantity"]) for item in doc.get("items", [])],
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


class MongoCartRepository(CartRepository):
    """One document per user, keyed by the user id."""

    def __init__(self, db: Database) -> None:
        self.collection = db.carts

    def _ensure(self, user_id: str) -> None:
        now = datetime.now(UTC)
        self.collection.update_one(
            {"_id": user_id},
            {"$setOnInsert": {"items": [], "created_at": now, "updated_at": now}},
            upsert=True,
        )

    def get_or_create(self, user_id: str) -> ShoppingCart:
        with store_operation("cart.get_or_create", user_id=user_id):
            self._ensure(user_id)
            return _from_document(self.collection.find_one({"_id": user_id}))

    def add_product(self, user_id: str, product_id: str) -> ShoppingCart:
        with store_operation("cart.add_product", user_id=user_id, product_id=product_id):
            self._ensure(user_id)

            # A lost $push race means the entry now exists to $inc, and vice versa
            for _ in range(MAX_ADD_ATTEMPTS):
                now = datetime.now(UTC)
                doc = self.collection.find_one_and_update(
                    {"_id": user_id, "items.product_id": product_id},
                    {"$inc": {"items.$.quantity": 1}, "$set": {"updated_at": now}},
                    return_document=ReturnDocument.AFTER,
                )
                if doc is not None:
                    return _from_document(doc)

                doc = self.collection.find_one_and_update(
                    {"_id": user_id, "items.product_id": {"$ne": product_id}},
                    {"$push": {"items": {"product_id": product_id, "quantity": 1}}, "$set": {"updated_at": now}},
                    return_document=ReturnDocument.AFTER,
                )
                if doc is not None:
                    return _from_document(doc)

            raise StoreUnavailable(
                "Cart update kept conflicting", user_id=user_id, product_id=product_id, attempts=MAX_ADD_ATTEMPTS
            )

    def remove_product(self, user_id: str, product_id: str) -> bool:
        with store_operation("cart.remove_product", user_id=user_id, product_id=product_id):
            result = self.collection.update_one(
                {"_id": user_id, "items.product_id": product_id},
                {
                    "$pull": {"items": {"product_id": product_id}},
                    "$set": {"updated_at": datetime.now(UTC)},
                },
            )
            return result.modified_count > 0

    def clear(self, user_id: str) -> None:
        with store_operation("cart.clear", user_id=user_id):
            self.collection.update_one(
                {"_id": user_id},
                {"$set": {"items": [], "updated_at": datetime.now(UTC)}},
                upsert=True,
            )
