"""Storefront database management CLI.

Provides commands to create and drop the MongoDB collections and indexes, and
to load a few demo products.

Usage:
    python src/manage.py setup-db   # Create indexes
    python src/manage.py drop-db    # Drop all collections
    python src/manage.py seed --email seller@example.com --password secret123
"""

import argparse
import sys
from decimal import Decimal

DEMO_PRODUCTS = [
    ("A Book", "10.00", "What a great book!", "https://images.example.com/book.png"),
    ("A Mug", "5.00", "Holds coffee.", "https://images.example.com/mug.png"),
    ("A Poster", "12.50", "Brightens any wall.", "https://images.example.com/poster.png"),
]


def _database():
    from shared.config import get_settings
    from shared.database import connect

    settings = get_settings()
    if not settings.mongodb_url:
        print("MONGODB_URL is not set.", file=sys.stderr)
        sys.exit(1)
    return connect(settings)


def setup_database():
    """Create the storefront indexes."""
    from shared.database import setup_db

    db = _database()
    print(f"Creating indexes in {db.name}...")
    setup_db(db)
    print("Done.")


def drop_database():
    """Drop every storefront collection."""
    from shared.database import drop_db

    db = _database()
    print(f"Dropping collections in {db.name}...")
    drop_db(db)
    print("Done.")


def seed(email: str, password: str):
    """Register a seller account (if missing) and list the demo products under it."""
    from catalogue.product.management import CatalogService
    from identity.account.passwords import hash_password
    from identity.account.user import User
    from identity.principal import AuthenticatedUser
    from shared.config import get_settings
    from shared.domain import init_domain
    from shared.stores import mongo_stores

    stores = mongo_stores(_database())

    with init_domain().domain_context():
        user = stores.users.find_by_email(email.strip().lower())
        if user is None:
            user = User.register(email, hash_password(password))
            stores.users.add(user)
            print(f"Created seller {user.email.address}")

        catalog = CatalogService(stores.products, currency=get_settings().currency)
        seller = AuthenticatedUser(user_id=str(user.id), email=user.email.address)
        for title, price, description, image_url in DEMO_PRODUCTS:
            catalog.create_product(
                seller, title=title, price=Decimal(price), description=description, image_url=image_url
            )
            print(f"  added {title}")

    print("Done.")


def main():
    from shared.logging import configure_logging

    configure_logging(log_file_prefix="manage")

    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create collections' indexes")
    subparsers.add_parser("drop-db", help="Drop all storefront collections")

    seed_parser = subparsers.add_parser("seed", help="Load demo products for a seller account")
    seed_parser.add_argument("--email", required=True, help="Seller account email")
    seed_parser.add_argument("--password", required=True, help="Password used if the account is created")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed(args.email, args.password)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
