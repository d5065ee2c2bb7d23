"""Password hashing with bcrypt."""

import bcrypt

BCRYPT_ROUNDS = 12


def hash_password(password: str, rounds: int | None = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("ascii"))
    except ValueError:
        # Malformed stored hash
        return False


def validate_password(password: str) -> str:
    """Passwords are at least 8 characters of letters and digits only."""
    if len(password) < 8 or not password.isascii() or not password.isalnum():
        raise ValueError("Please enter a password with only numbers and text and at least 8 characters")
    return password
