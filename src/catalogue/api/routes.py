"""FastAPI endpoints for the Catalogue domain.

Browsing is public; the /admin routes manage the logged-in seller's products.
"""

from fastapi import APIRouter, Depends, Query, Response

from catalogue.api.schemas import (
    CreateProductRequest,
    ProductPageResponse,
    ProductResponse,
    UpdateProductRequest,
)
from catalogue.product.management import CatalogService
from catalogue.product.product import Product
from identity.api.dependencies import current_user
from identity.principal import AuthenticatedUser
from shared.config import get_settings
from shared.money import to_amount
from shared.stores import get_stores

product_router = APIRouter(prefix="/products", tags=["products"])
admin_router = APIRouter(prefix="/admin/products", tags=["admin"])


def get_catalog() -> CatalogService:
    return CatalogService(get_stores().products, currency=get_settings().currency)


def _product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        title=product.title,
        description=product.description or "",
        image_url=product.image_url or "",
        price=to_amount(product.price, get_settings().currency),
        user_id=str(product.user_id),
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


# --- Public browsing ---


@product_router.get("", response_model=ProductPageResponse)
async def list_products(page: int = Query(1, ge=1), catalog: CatalogService = Depends(get_catalog)) -> ProductPageResponse:
    result = catalog.list_products(page=page, page_size=get_settings().products_per_page)
    return ProductPageResponse(
        products=[_product_response(p) for p in result.items],
        total_products=result.total,
        current_page=result.page,
        has_next_page=result.has_next_page,
        has_previous_page=result.has_previous_page,
        next_page=result.page + 1 if result.has_next_page else None,
        previous_page=result.page - 1 if result.has_previous_page else None,
        last_page=result.last_page,
    )


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, catalog: CatalogService = Depends(get_catalog)) -> ProductResponse:
    return _product_response(catalog.get_product(product_id))


# --- Seller management ---


@admin_router.get("", response_model=list[ProductResponse])
async def list_own_products(
    user: AuthenticatedUser = Depends(current_user),
    catalog: CatalogService = Depends(get_catalog),
) -> list[ProductResponse]:
    return [_product_response(p) for p in catalog.list_seller_products(user)]


@admin_router.post("", status_code=201, response_model=ProductResponse)
async def create_product(
    body: CreateProductRequest,
    user: AuthenticatedUser = Depends(current_user),
    catalog: CatalogService = Depends(get_catalog),
) -> ProductResponse:
    product = catalog.create_product(
        user,
        title=body.title,
        price=body.price,
        description=body.description,
        image_url=body.image_url,
    )
    return _product_response(product)


@admin_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    body: UpdateProductRequest,
    user: AuthenticatedUser = Depends(current_user),
    catalog: CatalogService = Depends(get_catalog),
) -> ProductResponse:
    product = catalog.update_product(user, product_id, **body.model_dump(exclude_none=True))
    return _product_response(product)


@admin_router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: str,
    user: AuthenticatedUser = Depends(current_user),
    catalog: CatalogService = Depends(get_catalog),
) -> Response:
    catalog.delete_product(user, product_id)
    return Response(status_code=204)
