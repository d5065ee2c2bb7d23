"""Catalog Store — product persistence behind a storage-agnostic interface."""

from abc import ABC, abstractmethod

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from pymongo import ASCENDING
from pymongo.database import Database

from catalogue.product.product import Product
from shared.errors import NotFound, store_operation


class ProductRepository(ABC):
    @abstractmethod
    def add(self, product: Product) -> None:
        """Insert or replace a product."""

    @abstractmethod
    def find(self, product_id: str) -> Product | None: ...

    @abstractmethod
    def delete(self, product_id: str) -> None: ...

    @abstractmethod
    def page(self, skip: int, limit: int) -> tuple[list[Product], int]:
        """Return one page of products (oldest first) and the total count."""

    @abstractmethod
    def list_by_owner(self, user_id: str) -> list[Product]: ...

    def get(self, product_id: str) -> Product:
        product = self.find(product_id)
        if product is None:
            raise NotFound(f"Product {product_id} not found", product_id=product_id)
        return product

    def find_many(self, product_ids: list[str]) -> dict[str, Product]:
        found = {}
        for product_id in product_ids:
            product = self.find(product_id)
            if product is not None:
                found[product_id] = product
        return found


class MemoryProductRepository(ProductRepository):
    """Products in the domain's memory provider."""

    @property
    def repo(self):
        return current_domain.repository_for(Product)

    def add(self, product: Product) -> None:
        self.repo.add(product)

    def find(self, product_id: str) -> Product | None:
        try:
            return self.repo.get(product_id)
        except ObjectNotFoundError:
            return None

    def delete(self, product_id: str) -> None:
        product = self.find(product_id)
        if product is not None:
            self.repo._dao.delete(product)

    def page(self, skip: int, limit: int) -> tuple[list[Product], int]:
        results = self.repo._dao.query.order_by("created_at").offset(skip).limit(limit).all()
        return list(results.items), results.total

    def list_by_owner(self, user_id: str) -> list[Product]:
        return list(self.repo._dao.query.filter(user_id=user_id).order_by("created_at").all().items)


def _to_document(product: Product) -> dict:
    return {
        "_id": str(product.id),
        "user_id": str(product.user_id),
        "title": product.title,
        "description": product.description,
        "image_url": product.image_url,
        # decimal text, e.g. "19.99"
        "price": str(product.price),
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


def _from_document(doc: dict | None) -> Product | None:
    if doc is None:
        return None
    return Product(
        id=str(doc["_id"]),
        user_id=doc["user_id"],
        title=doc["title"],
        description=doc.get("description"),
        image_url=doc.get("image_url"),
        price=float(doc["price"]),
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


class MongoProductRepository(ProductRepository):
    def __init__(self, db: Database) -> None:
        self.collection = db.products

    def add(self, product: Product) -> None:
        with store_operation("product.add", product_id=str(product.id)):
            self.collection.replace_one({"_id": str(product.id)}, _to_document(product), upsert=True)

    def find(self, product_id: str) -> Product | None:
        with store_operation("product.find", product_id=product_id):
            return _from_document(self.collection.find_one({"_id": product_id}))

    def delete(self, product_id: str) -> None:
        with store_operation("product.delete", product_id=product_id):
            self.collection.delete_one({"_id": product_id})

    def page(self, skip: int, limit: int) -> tuple[list[Product], int]:
        with store_operation("product.page", skip=skip, limit=limit):
            total = self.collection.count_documents({})
            cursor = self.collection.find({}).sort([("created_at", ASCENDING), ("_id", ASCENDING)]).skip(skip).limit(limit)
            return [_from_document(doc) for doc in cursor], total

    def list_by_owner(self, user_id: str) -> list[Product]:
        with store_operation("product.list_by_owner", user_id=user_id):
            cursor = self.collection.find({"user_id": user_id}).sort("created_at", ASCENDING)
            return [_from_document(doc) for doc in cursor]

    def find_many(self, product_ids: list[str]) -> dict[str, Product]:
        with store_operation("product.find_many", count=len(product_ids)):
            cursor = self.collection.find({"_id": {"$in": list(product_ids)}})
            return {str(doc["_id"]): _from_document(doc) for doc in cursor}
