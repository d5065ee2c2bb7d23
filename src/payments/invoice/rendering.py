"""PDF rendering of invoices with reportlab.

The whole document is drawn into an in-memory buffer; nothing touches the
filesystem here. A new page is started whenever the next line would fall
below the bottom margin.
"""

import io

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from payments.invoice.invoice import InvoiceDocument

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 20 * mm
LINE_HEIGHT = 7 * mm
TITLE_SIZE = 26
BODY_SIZE = 12


class _InvoiceCanvas:
    """Tracks the cursor position and breaks pages as lines are written."""

    def __init__(self, buffer: io.BytesIO, title: str) -> None:
        self.pdf = canvas.Canvas(buffer, pagesize=A4)
        self.pdf.setTitle(title)
        self.pages = 1
        self.y = PAGE_HEIGHT - MARGIN

    def ensure_room(self, height: float) -> None:
        if self.y - height < MARGIN:
            self.pdf.showPage()
            self.pages += 1
            self.y = PAGE_HEIGHT - MARGIN

    def write(self, text: str, size: int = BODY_SIZE, right: str | None = None) -> None:
        self.ensure_room(LINE_HEIGHT)
        self.pdf.setFont("Helvetica", size)
        self.pdf.drawString(MARGIN, self.y, text)
        if right is not None:
            self.pdf.drawRightString(PAGE_WIDTH - MARGIN, self.y, right)
        self.y -= LINE_HEIGHT

    def rule(self) -> None:
        self.ensure_room(LINE_HEIGHT)
        self.pdf.line(MARGIN, self.y + LINE_HEIGHT / 2, PAGE_WIDTH - MARGIN, self.y + LINE_HEIGHT / 2)
        self.y -= LINE_HEIGHT / 2

    def finish(self) -> None:
        self.pdf.save()


def render_invoice(document: InvoiceDocument) -> bytes:
    """Render an invoice to PDF bytes."""
    buffer = io.BytesIO()
    page = _InvoiceCanvas(buffer, title=document.filename)

    page.ensure_room(TITLE_SIZE)
    page.pdf.setFont("Helvetica-Bold", TITLE_SIZE)
    page.pdf.drawString(MARGIN, page.y - TITLE_SIZE / 2, "Invoice")
    page.y -= TITLE_SIZE + LINE_HEIGHT / 2

    page.write(f"Order: {document.order_id}")
    page.write(f"Customer: {document.email}")
    page.write(f"Date: {document.issued_at:%Y-%m-%d}")
    page.rule()

    currency = document.currency.upper()
    for line in document.lines:
        page.write(
            f"{line.title} - {line.quantity} x {line.unit_price} {currency}",
            right=f"{line.total} {currency}",
        )

    page.rule()
    page.write("Total", size=BODY_SIZE + 2, right=f"{document.total} {currency}")
    page.finish()
    return buffer.getvalue()
