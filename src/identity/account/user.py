"""User account aggregate."""

import secrets
from datetime import UTC, datetime, timedelta

from protean.fields import DateTime, String, ValueObject

from identity.shared.email import EmailAddress
from shared.domain import storefront


@storefront.aggregate
class User:
    email: ValueObject(EmailAddress, required=True)
    password_hash: String(required=True, max_length=255)
    reset_token: String(max_length=128)
    reset_token_expires_at: DateTime()
    created_at: DateTime()

    @classmethod
    def register(cls, email: str, password_hash: str) -> "User":
        return cls(email=EmailAddress.parse(email), password_hash=password_hash, created_at=datetime.now(UTC))

    def issue_reset_token(self, ttl_seconds: int, now: datetime | None = None) -> str:
        """Generate a fresh 32-byte hex token, replacing any earlier one."""
        now = now or datetime.now(UTC)
        self.reset_token = secrets.token_hex(32)
        self.reset_token_expires_at = now + timedelta(seconds=ttl_seconds)
        return self.reset_token

    def reset_token_valid(self, token: str, now: datetime | None = None) -> bool:
        if not self.reset_token or self.reset_token_expires_at is None:
            return False
        now = now or datetime.now(UTC)
        expires_at = self.reset_token_expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        return secrets.compare_digest(self.reset_token, token) and now < expires_at

    def change_password(self, password_hash: str) -> None:
        self.password_hash = password_hash
        self.reset_token = None
        self.reset_token_expires_at = None
