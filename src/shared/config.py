"""Runtime settings for the storefront, read from environment variables.

``STOREFRONT_ENV`` selects the overlay used elsewhere (logging renderer,
gateway selection):
    - "test"        → memory stores, fake gateway, quiet logs
    - "development" → memory stores unless MONGODB_URL is set
    - "production"  → MongoDB, Stripe, JSON logs
"""

import os
from dataclasses import dataclass
from functools import lru_cache

from shared.money import VALID_CURRENCIES


@dataclass(frozen=True)
class Settings:
    env: str
    mongodb_url: str | None
    mongodb_database: str
    session_secret: str
    base_url: str
    currency: str
    products_per_page: int
    stripe_api_key: str | None
    invoice_dir: str
    reset_token_ttl_seconds: int

    def __post_init__(self) -> None:
        if self.currency not in VALID_CURRENCIES:
            raise ValueError(f"Unsupported CURRENCY {self.currency!r}")

    @property
    def is_production(self) -> bool:
        return self.env in ("production", "staging")

    @property
    def checkout_success_url(self) -> str:
        # Stripe substitutes the session id into this template
        return f"{self.base_url}/checkout/success?session_id={{CHECKOUT_SESSION_ID}}"

    @property
    def checkout_cancel_url(self) -> str:
        return f"{self.base_url}/checkout/cancel"


def get_env() -> str:
    return (os.getenv("STOREFRONT_ENV") or os.getenv("ENVIRONMENT") or "development").lower()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process. Call ``get_settings.cache_clear()`` after changing the environment."""
    return Settings(
        env=get_env(),
        mongodb_url=os.getenv("MONGODB_URL") or None,
        mongodb_database=os.getenv("MONGODB_DATABASE", "storefront"),
        session_secret=os.getenv("SESSION_SECRET", "dev-session-secret"),
        base_url=os.getenv("BASE_URL", "http://localhost:8000").rstrip("/"),
        currency=os.getenv("CURRENCY", "usd").lower(),
        products_per_page=int(os.getenv("PRODUCTS_PER_PAGE", "6")),
        stripe_api_key=os.getenv("STRIPE_API_KEY") or None,
        invoice_dir=os.getenv("INVOICE_DIR", "data/invoices"),
        reset_token_ttl_seconds=int(os.getenv("RESET_TOKEN_TTL_SECONDS", "3600")),
    )
