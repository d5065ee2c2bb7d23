"""The authenticated caller, passed explicitly into every user-scoped operation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthenticatedUser:
    user_id: str
    email: str
