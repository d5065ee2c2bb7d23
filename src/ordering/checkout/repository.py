"""Checkout session persistence, keyed by the provider's session id."""

from abc import ABC, abstractmethod

from protean.utils.globals import current_domain
from pymongo.database import Database

from ordering.checkout.session import CheckoutSession
from shared.errors import NotFound, store_operation


class CheckoutSessionRepository(ABC):
    @abstractmethod
    def add(self, session: CheckoutSession) -> None: ...

    @abstractmethod
    def find(self, session_id: str) -> CheckoutSession | None: ...

    def get(self, session_id: str) -> CheckoutSession:
        session = self.find(session_id)
        if session is None:
            raise NotFound(f"Checkout session {session_id} not found", session_id=session_id)
        return session


class MemoryCheckoutSessionRepository(CheckoutSessionRepository):
    @property
    def repo(self):
        return current_domain.repository_for(CheckoutSession)

    def add(self, session: CheckoutSession) -> None:
        self.repo.add(session)

    def find(self, session_id: str) -> CheckoutSession | None:
        sessions = self.repo._dao.query.filter(session_id=session_id).all().items
        return sessions[0] if sessions else None


def _to_document(session: CheckoutSession) -> dict:
    return {
        "_id": str(session.session_id),
        "user_id": str(session.user_id),
        "email": session.email,
        "lines": [{**line, "price": str(line["price"])} for line in session.line_snapshot()],
        "total": str(session.total_amount),
        "currency": session.currency,
        "checkout_url": session.checkout_url,
        "status": session.status,
        "order_id": str(session.order_id) if session.order_id else None,
        "created_at": session.created_at,
        "updated_at": session.updated_at,
    }


def _from_document(doc: dict | None) -> CheckoutSession | None:
    if doc is None:
        return None
    return CheckoutSession.open(
        session_id=str(doc["_id"]),
        user_id=doc["user_id"],
        email=doc["email"],
        lines=doc["lines"],
        currency=doc["currency"],
        checkout_url=doc["checkout_url"],
        status=doc["status"],
        order_id=doc.get("order_id"),
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


class MongoCheckoutSessionRepository(CheckoutSessionRepository):
    def __init__(self, db: Database) -> None:
        self.collection = db.checkout_sessions

    def add(self, session: CheckoutSession) -> None:
        with store_operation("checkout_session.add", session_id=str(session.session_id), user_id=str(session.user_id)):
            doc = _to_document(session)
            self.collection.replace_one({"_id": doc["_id"]}, doc, upsert=True)

    def find(self, session_id: str) -> CheckoutSession | None:
        with store_operation("checkout_session.find", session_id=session_id):
            return _from_document(self.collection.find_one({"_id": session_id}))
