"""User account persistence."""

import threading
from abc import ABC, abstractmethod

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from identity.account.user import User
from identity.shared.email import EmailAddress
from shared.errors import DuplicateKey, NotFound, store_operation


class UserRepository(ABC):
    @abstractmethod
    def add(self, user: User) -> None:
        """Insert a new user. Raises DuplicateKey when the email is taken."""

    @abstractmethod
    def update(self, user: User) -> None: ...

    @abstractmethod
    def find(self, user_id: str) -> User | None: ...

    @abstractmethod
    def find_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    def find_by_reset_token(self, token: str) -> User | None: ...

    def get(self, user_id: str) -> User:
        user = self.find(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found", user_id=user_id)
        return user


class MemoryUserRepository(UserRepository):
    """Users in the domain's memory provider."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @property
    def repo(self):
        return current_domain.repository_for(User)

    def add(self, user: User) -> None:
        with self._lock:
            if self.find_by_email(user.email.address) is not None:
                raise DuplicateKey("Email already taken", email=user.email.address)
            self.repo.add(user)

    def update(self, user: User) -> None:
        self.repo.add(user)

    def find(self, user_id: str) -> User | None:
        try:
            return self.repo.get(user_id)
        except ObjectNotFoundError:
            return None

    def find_by_email(self, email: str) -> User | None:
        users = self.repo._dao.query.filter(email_address=email).all().items
        return users[0] if users else None

    def find_by_reset_token(self, token: str) -> User | None:
        if not token:
            return None
        users = self.repo._dao.query.filter(reset_token=token).all().items
        return users[0] if users else None


def _to_document(user: User) -> dict:
    return {
        "_id": str(user.id),
        "email": user.email.address,
        "password_hash": user.password_hash,
        "reset_token": user.reset_token,
        "reset_token_expires_at": user.reset_token_expires_at,
        "created_at": user.created_at,
    }


def _from_document(doc: dict | None) -> User | None:
    if doc is None:
        return None
    return User(
        id=str(doc["_id"]),
        email=EmailAddress(address=doc["email"]),
        password_hash=doc["password_hash"],
        reset_token=doc.get("reset_token"),
        reset_token_expires_at=doc.get("reset_token_expires_at"),
        created_at=doc.get("created_at"),
    )


class MongoUserRepository(UserRepository):
    def __init__(self, db: Database) -> None:
        self.collection = db.users

    def add(self, user: User) -> None:
        with store_operation("user.add", user_id=str(user.id)):
            try:
                self.collection.insert_one(_to_document(user))
            except DuplicateKeyError as exc:
                raise DuplicateKey("Email already taken", email=user.email.address) from exc

    def update(self, user: User) -> None:
        with store_operation("user.update", user_id=str(user.id)):
            doc = _to_document(user)
            self.collection.replace_one({"_id": doc["_id"]}, doc)

    def find(self, user_id: str) -> User | None:
        with store_operation("user.find", user_id=user_id):
            return _from_document(self.collection.find_one({"_id": user_id}))

    def find_by_email(self, email: str) -> User | None:
        with store_operation("user.find_by_email"):
            return _from_document(self.collection.find_one({"email": email}))

    def find_by_reset_token(self, token: str) -> User | None:
        if not token:
            return None
        with store_operation("user.find_by_reset_token"):
            return _from_document(self.collection.find_one({"reset_token": token}))
