"""Catalogue domain API package."""

from catalogue.api.routes import admin_router, product_router

__all__ = ["product_router", "admin_router"]
