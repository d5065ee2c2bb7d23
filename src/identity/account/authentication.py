"""Login — verify credentials and produce the session principal."""

import structlog

from identity.account.passwords import verify_password
from identity.account.repository import UserRepository
from identity.principal import AuthenticatedUser
from shared.errors import InvalidCredentials

logger = structlog.get_logger(__name__)


class Authentication:
    def __init__(self, users: UserRepository) -> None:
        self.users = users

    def authenticate(self, email: str, password: str) -> AuthenticatedUser:
        user = self.users.find_by_email(email.strip().lower())
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Login failed")
            raise InvalidCredentials("Invalid email or password.")

        logger.info("User logged in", user_id=str(user.id))
        return AuthenticatedUser(user_id=str(user.id), email=user.email.address)
