"""EmailAddress value object and the normalization shared by signup, login and password reset."""

from protean import invariant
from protean.fields import String

from shared.domain import storefront

_FORBIDDEN = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


def _check_structure(email: str) -> None:
    if not email or len(email) > 254 or any(ch.isspace() for ch in email):
        raise ValueError("Please enter a valid email.")

    if email.count("@") != 1:
        raise ValueError("Please enter a valid email.")

    local_part, domain_part = email.split("@", 1)

    for part in (local_part, domain_part):
        if not part or part.startswith(".") or part.endswith(".") or ".." in part:
            raise ValueError("Please enter a valid email.")

    if "." not in domain_part:
        raise ValueError("Please enter a valid email.")

    for label in domain_part.split("."):
        if label.startswith("-") or label.endswith("-"):
            raise ValueError("Please enter a valid email.")

    if any(ch in email for ch in _FORBIDDEN):
        raise ValueError("Please enter a valid email.")


def normalize_email(value: str) -> str:
    """Validate an email address and return it trimmed and lowercased."""
    email = value.strip().lower()
    _check_structure(email)
    return email


@storefront.value_object
class EmailAddress:
    """A validated, lowercased email address.

    Enforces structural validity: exactly one @, non-empty local and domain
    parts without leading/trailing or doubled dots, a dotted domain whose
    labels do not start or end with a hyphen, no whitespace or forbidden
    characters.
    """

    address: String(required=True, max_length=254)

    @invariant.post
    def verify_email_address(self):
        _check_structure(self.address)
        if self.address != self.address.lower():
            raise ValueError("Please enter a valid email.")

    @classmethod
    def parse(cls, value: str) -> "EmailAddress":
        return cls(address=normalize_email(value))
