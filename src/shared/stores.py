"""Repository registry.

Provides get_stores() / set_stores() to swap the storage backend:
- memory repositories for development and tests
- MongoDB repositories when MONGODB_URL is configured
"""

from dataclasses import dataclass

import structlog
from pymongo.database import Database

from catalogue.product.repository import MemoryProductRepository, MongoProductRepository, ProductRepository
from identity.account.repository import MemoryUserRepository, MongoUserRepository, UserRepository
from ordering.cart.repository import CartRepository, MemoryCartRepository, MongoCartRepository
from ordering.checkout.repository import (
    CheckoutSessionRepository,
    MemoryCheckoutSessionRepository,
    MongoCheckoutSessionRepository,
)
from ordering.order.repository import MemoryOrderRepository, MongoOrderRepository, OrderRepository
from shared.config import get_settings
from shared.database import connect, setup_db

logger = structlog.get_logger(__name__)


@dataclass
class Stores:
    products: ProductRepository
    carts: CartRepository
    orders: OrderRepository
    checkout_sessions: CheckoutSessionRepository
    users: UserRepository


def memory_stores() -> Stores:
    return Stores(
        products=MemoryProductRepository(),
        carts=MemoryCartRepository(),
        orders=MemoryOrderRepository(),
        checkout_sessions=MemoryCheckoutSessionRepository(),
        users=MemoryUserRepository(),
    )


def mongo_stores(db: Database) -> Stores:
    # Idempotent; the unique indexes back checkout completion and signup
    setup_db(db)
    return Stores(
        products=MongoProductRepository(db),
        carts=MongoCartRepository(db),
        orders=MongoOrderRepository(db),
        checkout_sessions=MongoCheckoutSessionRepository(db),
        users=MongoUserRepository(db),
    )


_current_stores: Stores | None = None


def get_stores() -> Stores:
    """Return the active stores, building them from settings on first use."""
    global _current_stores
    if _current_stores is None:
        settings = get_settings()
        if settings.mongodb_url and settings.env != "test":
            logger.info("Using MongoDB stores", database=settings.mongodb_database)
            _current_stores = mongo_stores(connect(settings))
        else:
            logger.info("Using in-memory stores", env=settings.env)
            _current_stores = memory_stores()
    return _current_stores


def set_stores(stores: Stores) -> None:
    global _current_stores
    _current_stores = stores


def reset_stores() -> None:
    global _current_stores
    _current_stores = None
