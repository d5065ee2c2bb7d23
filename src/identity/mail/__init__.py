"""Mailer registry.

Uses the recording fake adapter by default; a real provider adapter can be
installed at startup with set_mailer().
"""

from identity.mail.email_port import EmailPort
from identity.mail.fake_email import FakeEmailAdapter

_current_mailer: EmailPort | None = None


def get_mailer() -> EmailPort:
    global _current_mailer
    if _current_mailer is None:
        _current_mailer = FakeEmailAdapter()
    return _current_mailer


def set_mailer(mailer: EmailPort) -> None:
    global _current_mailer
    _current_mailer = mailer


def reset_mailer() -> None:
    """Reset to the default mailer (useful for testing)."""
    global _current_mailer
    _current_mailer = None
