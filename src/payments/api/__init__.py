"""Payments domain API package."""

from payments.api.routes import invoice_router

__all__ = ["invoice_router"]
