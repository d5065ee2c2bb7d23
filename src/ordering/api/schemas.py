"""Pydantic request/response schemas for the Ordering API."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

# --- Request Schemas ---


class AddToCartRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"product_id": "3f0c8e2a-5b8d-4c1e-9a37-1d2b6f4e8a90"}]}}

    product_id: str = Field(..., min_length=1, max_length=255)


# --- Response Schemas ---


class CartLineResponse(BaseModel):
    product_id: str
    title: str
    description: str
    image_url: str
    price: Decimal
    quantity: int
    subtotal: Decimal


class CartResponse(BaseModel):
    items: list[CartLineResponse]
    total: Decimal


class CheckoutSessionResponse(BaseModel):
    session_id: str
    checkout_url: str
    total: Decimal
    currency: str
    status: str


class OrderItemResponse(BaseModel):
    product_id: str
    title: str
    description: str
    image_url: str
    price: Decimal
    quantity: int
    subtotal: Decimal


class OrderResponse(BaseModel):
    order_id: str
    email: str
    items: list[OrderItemResponse]
    total: Decimal
    currency: str
    created_at: datetime
