"""Password reset — token issue, verification and password replacement.

A reset token is a random 32-byte hex string stored on the user with an
expiry (one hour by default). Setting a new password consumes the token.
"""

import structlog

from identity.account.passwords import hash_password, validate_password
from identity.account.repository import UserRepository
from identity.mail.email_port import EmailPort
from shared.errors import NotFound, ValidationFailed

logger = structlog.get_logger(__name__)


class PasswordReset:
    def __init__(self, users: UserRepository, mailer: EmailPort, base_url: str, ttl_seconds: int = 3600) -> None:
        self.users = users
        self.mailer = mailer
        self.base_url = base_url
        self.ttl_seconds = ttl_seconds

    def request_reset(self, email: str) -> None:
        user = self.users.find_by_email(email.strip().lower())
        if user is None:
            raise NotFound("No account with that email found.")

        token = user.issue_reset_token(self.ttl_seconds)
        self.users.update(user)

        link = f"{self.base_url}/reset/{token}"
        self.mailer.send(
            to=user.email.address,
            subject="Password reset",
            body=f"You requested a password reset. Use this link to set a new password: {link}",
            html_body=f'<p>You requested a password reset</p><p>Click this <a href="{link}">link</a> to set a new password.</p>',
        )
        logger.info("Password reset requested", user_id=str(user.id))

    def verify_token(self, token: str) -> str:
        """Return the id of the user the token belongs to."""
        user = self.users.find_by_reset_token(token)
        if user is None or not user.reset_token_valid(token):
            raise NotFound("Reset token is invalid or has expired.")
        return str(user.id)

    def reset_password(self, user_id: str, token: str, password: str) -> None:
        user = self.users.find(user_id)
        if user is None or not user.reset_token_valid(token):
            raise NotFound("Reset token is invalid or has expired.")

        try:
            validate_password(password)
        except ValueError as exc:
            raise ValidationFailed("Password rejected", errors={"password": str(exc)}) from exc

        user.change_password(hash_password(password))
        self.users.update(user)
        logger.info("Password reset", user_id=str(user.id))
