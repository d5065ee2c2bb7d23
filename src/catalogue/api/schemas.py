"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

# --- Product Request Schemas ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Classic Black T-Shirt",
                    "price": "19.99",
                    "description": "Premium cotton crew-neck tee in black.",
                    "image_url": "https://images.example.com/tshirt-black.png",
                }
            ]
        }
    }

    title: str = Field(..., min_length=1, max_length=255)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    description: str = Field("", max_length=5000)
    image_url: str = Field("", max_length=2048)


class UpdateProductRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"title": "Classic Black Tee", "price": "17.50"}]}}

    title: str | None = Field(None, min_length=1, max_length=255)
    price: Decimal | None = Field(None, ge=0, decimal_places=2)
    description: str | None = Field(None, max_length=5000)
    image_url: str | None = Field(None, max_length=2048)


# --- Product Response Schemas ---


class ProductResponse(BaseModel):
    id: str
    title: str
    description: str
    image_url: str
    price: Decimal
    user_id: str
    created_at: datetime | None
    updated_at: datetime | None


class ProductPageResponse(BaseModel):
    products: list[ProductResponse]
    total_products: int
    current_page: int
    has_next_page: bool
    has_previous_page: bool
    next_page: int | None
    previous_page: int | None
    last_page: int
