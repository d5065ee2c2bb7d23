"""Request-scoped dependencies: the session principal and identity services."""

from fastapi import Request

from identity.account.authentication import Authentication
from identity.account.registration import Registration
from identity.account.reset import PasswordReset
from identity.mail import get_mailer
from identity.principal import AuthenticatedUser
from shared.config import get_settings
from shared.errors import NotAuthenticated
from shared.stores import get_stores

SESSION_USER_ID = "user_id"
SESSION_EMAIL = "email"


def current_user(request: Request) -> AuthenticatedUser:
    """Resolve the logged-in user from the signed session cookie."""
    user_id = request.session.get(SESSION_USER_ID)
    email = request.session.get(SESSION_EMAIL)
    if not user_id or not email:
        raise NotAuthenticated("Login required")
    return AuthenticatedUser(user_id=user_id, email=email)


def get_registration() -> Registration:
    return Registration(get_stores().users, get_mailer())


def get_authentication() -> Authentication:
    return Authentication(get_stores().users)


def get_password_reset() -> PasswordReset:
    settings = get_settings()
    return PasswordReset(
        get_stores().users,
        get_mailer(),
        base_url=settings.base_url,
        ttl_seconds=settings.reset_token_ttl_seconds,
    )
