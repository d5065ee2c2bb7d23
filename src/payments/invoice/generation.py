"""Invoice generation — render an order's invoice and store it before handing it out."""

import structlog

from identity.principal import AuthenticatedUser
from ordering.order.history import OrderHistory
from payments.invoice.invoice import InvoiceDocument
from payments.invoice.rendering import render_invoice
from payments.invoice.storage import InvoiceStore

logger = structlog.get_logger(__name__)


class InvoiceService:
    def __init__(self, history: OrderHistory, store: InvoiceStore) -> None:
        self.history = history
        self.store = store

    def generate(self, user: AuthenticatedUser, order_id: str) -> tuple[str, bytes]:
        """Return ``(filename, pdf_bytes)`` for an order the user owns.

        Raises NotFound / Unauthorized before anything is rendered. The PDF is
        only returned once it has been stored in full.
        """
        order = self.history.get_order(user, order_id)
        document = InvoiceDocument.for_order(order)

        content = render_invoice(document)
        self.store.write(document.filename, content)
        logger.info("Invoice generated", order_id=order_id, user_id=user.user_id, size=len(content))
        return document.filename, content
