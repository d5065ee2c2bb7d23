"""Order Ledger — append-only order storage."""

import threading
from abc import ABC, abstractmethod

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from pymongo import ASCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from ordering.order.order import Order
from shared.errors import DuplicateKey, NotFound, store_operation


class OrderRepository(ABC):
    @abstractmethod
    def save(self, order: Order) -> None:
        """Append an order. Raises DuplicateKey if its checkout session already produced one."""

    @abstractmethod
    def find(self, order_id: str) -> Order | None: ...

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[Order]:
        """All orders of a user, oldest first."""

    @abstractmethod
    def find_by_checkout_session(self, session_id: str) -> Order | None: ...

    def get(self, order_id: str) -> Order:
        order = self.find(order_id)
        if order is None:
            raise NotFound(f"Order {order_id} not found", order_id=order_id)
        return order


class MemoryOrderRepository(OrderRepository):
    """Orders in the domain's memory provider; one order per checkout session."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @property
    def repo(self):
        return current_domain.repository_for(Order)

    def save(self, order: Order) -> None:
        with self._lock:
            if self.find(str(order.id)) is not None:
                raise DuplicateKey("Order already exists", order_id=str(order.id))
            if self.find_by_checkout_session(str(order.checkout_session_id)) is not None:
                raise DuplicateKey(
                    "Checkout session already has an order",
                    checkout_session_id=str(order.checkout_session_id),
                )
            self.repo.add(order)

    def find(self, order_id: str) -> Order | None:
        try:
            return self.repo.get(order_id)
        except ObjectNotFoundError:
            return None

    def list_by_user(self, user_id: str) -> list[Order]:
        return list(self.repo._dao.query.filter(user_id=user_id).order_by("created_at").all().items)

    def find_by_checkout_session(self, session_id: str) -> Order | None:
        orders = self.repo._dao.query.filter(checkout_session_id=session_id).all().items
        return orders[0] if orders else None


def _to_document(order: Order) -> dict:
    return {
        "_id": str(order.id),
        "user_id": str(order.user_id),
        "email": order.email,
        "items": [
            {
                "product_id": str(item.product_id),
                "title": item.title,
                "description": item.description or "",
                "image_url": item.image_url or "",
                # decimal text at the order currency's precision
                "price": str(item.price),
                "quantity": item.quantity,
            }
            for item in order.items
        ],
        "total": str(order.total),
        "currency": order.currency,
        "checkout_session_id": str(order.checkout_session_id),
        "created_at": order.created_at,
    }


def _from_document(doc: dict | None) -> Order | None:
    if doc is None:
        return None
    return Order.place(
        user_id=doc["user_id"],
        email=doc["email"],
        lines=doc["items"],
        currency=doc["currency"],
        checkout_session_id=doc["checkout_session_id"],
        order_id=str(doc["_id"]),
        created_at=doc.get("created_at"),
    )


class MongoOrderRepository(OrderRepository):
    def __init__(self, db: Database) -> None:
        self.collection = db.orders

    def save(self, order: Order) -> None:
        with store_operation("order.save", order_id=str(order.id), user_id=str(order.user_id)):
            try:
                self.collection.insert_one(_to_document(order))
            except DuplicateKeyError as exc:
                raise DuplicateKey(
                    "Checkout session already has an order",
                    checkout_session_id=str(order.checkout_session_id),
                ) from exc

    def find(self, order_id: str) -> Order | None:
        with store_operation("order.find", order_id=order_id):
            return _from_document(self.collection.find_one({"_id": order_id}))

    def list_by_user(self, user_id: str) -> list[Order]:
        with store_operation("order.list_by_user", user_id=user_id):
            cursor = self.collection.find({"user_id": user_id}).sort([("created_at", ASCENDING), ("_id", ASCENDING)])
            return [_from_document(doc) for doc in cursor]

    def find_by_checkout_session(self, session_id: str) -> Order | None:
        with store_operation("order.find_by_checkout_session", checkout_session_id=session_id):
            return _from_document(self.collection.find_one({"checkout_session_id": session_id}))
