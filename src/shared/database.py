"""MongoDB connection and schema (index) management."""

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from shared.config import Settings

COLLECTIONS = ("products", "carts", "orders", "checkout_sessions", "users")


def connect(settings: Settings) -> Database:
    """Open a client for the configured URL and return the storefront database."""
    client = MongoClient(settings.mongodb_url, tz_aware=True)
    return client[settings.mongodb_database]


def setup_db(db: Database) -> None:
    """Create the indexes the storefront relies on."""
    db.products.create_index([("user_id", ASCENDING)])
    db.products.create_index([("created_at", ASCENDING)])
    db.orders.create_index([("user_id", ASCENDING), ("created_at", ASCENDING)])
    db.orders.create_index([("checkout_session_id", ASCENDING)], unique=True)
    db.checkout_sessions.create_index([("user_id", ASCENDING)])
    db.users.create_index([("email", ASCENDING)], unique=True)
    db.users.create_index([("reset_token", ASCENDING)], sparse=True)


def drop_db(db: Database) -> None:
    """Drop every storefront collection."""
    for name in COLLECTIONS:
        db.drop_collection(name)
