"""FastAPI endpoints for the Payments domain: order invoices."""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from identity.api.dependencies import current_user
from identity.principal import AuthenticatedUser
from ordering.order.history import OrderHistory
from payments.invoice.generation import InvoiceService
from payments.invoice.storage import get_invoice_store
from shared.stores import get_stores

invoice_router = APIRouter(prefix="/orders", tags=["invoices"])


def get_invoice_service() -> InvoiceService:
    return InvoiceService(OrderHistory(get_stores().orders), get_invoice_store())


@invoice_router.get("/{order_id}/invoice", response_class=Response)
async def get_invoice(
    order_id: str,
    user: AuthenticatedUser = Depends(current_user),
    invoices: InvoiceService = Depends(get_invoice_service),
) -> Response:
    """Render, store and return the order's invoice as an inline PDF."""
    filename, content = invoices.generate(user, order_id)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )
