"""Account registration — signup with email, password and confirmation."""

import structlog

from identity.account.passwords import hash_password, validate_password
from identity.account.repository import UserRepository
from identity.account.user import User
from identity.mail.email_port import EmailPort
from identity.shared.email import normalize_email
from shared.errors import DuplicateKey, ValidationFailed

logger = structlog.get_logger(__name__)


class Registration:
    def __init__(self, users: UserRepository, mailer: EmailPort) -> None:
        self.users = users
        self.mailer = mailer

    def _validate(self, email: str, password: str, confirm_password: str) -> str:
        errors = {}
        try:
            email = normalize_email(email)
        except ValueError as exc:
            errors["email"] = str(exc)
        else:
            if self.users.find_by_email(email) is not None:
                errors["email"] = "Email already taken"

        try:
            validate_password(password)
        except ValueError as exc:
            errors["password"] = str(exc)

        if confirm_password != password:
            errors["confirm_password"] = "Passwords have to match"

        if errors:
            raise ValidationFailed("Signup rejected", errors=errors)
        return email

    def register(self, email: str, password: str, confirm_password: str) -> User:
        email = self._validate(email, password, confirm_password)

        user = User.register(email, hash_password(password))
        try:
            self.users.add(user)
        except DuplicateKey as exc:
            # Lost a race with a concurrent signup for the same address
            raise ValidationFailed("Signup rejected", errors={"email": "Email already taken"}) from exc

        logger.info("User registered", user_id=str(user.id))
        self.mailer.send(
            to=user.email.address,
            subject="Signup succeeded!",
            body="You successfully signed up!",
            html_body="<h1>You successfully signed up!</h1>",
        )
        return user
