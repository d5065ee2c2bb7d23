"""Domain composition root.

Every aggregate, entity and value object of the storefront registers on
``storefront``. PROTEAN_ENV selects the config overlay; without a domain.toml
the domain runs on Protean's memory provider, which backs the in-process
repositories used in development and tests.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)

_initialized = False


def init_domain() -> Domain:
    """Import the element modules and initialize the domain once per process."""
    global _initialized
    if _initialized:
        return storefront

    import catalogue.product.product  # noqa: F401
    import identity.account.user  # noqa: F401
    import identity.shared.email  # noqa: F401
    import ordering.cart.cart  # noqa: F401
    import ordering.checkout.session  # noqa: F401
    import ordering.order.order  # noqa: F401

    storefront.init(traverse=False)
    _initialized = True
    logger.debug("Domain initialized", domain=storefront.name)
    return storefront
