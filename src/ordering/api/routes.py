"""FastAPI endpoints for the Ordering domain: cart, checkout and order history.

Every route requires a logged-in session.
"""

from fastapi import APIRouter, Depends, Query

from identity.api.dependencies import current_user
from identity.principal import AuthenticatedUser
from ordering.api.schemas import (
    AddToCartRequest,
    CartLineResponse,
    CartResponse,
    CheckoutSessionResponse,
    OrderItemResponse,
    OrderResponse,
)
from ordering.cart.contents import CartContents
from ordering.cart.items import CartService
from ordering.checkout.orchestrator import CheckoutService
from ordering.checkout.session import CheckoutSession
from ordering.order.history import OrderHistory
from ordering.order.order import Order
from payments.gateway import get_gateway
from shared.config import get_settings
from shared.money import to_amount
from shared.stores import get_stores

cart_router = APIRouter(prefix="/cart", tags=["cart"])
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])
order_router = APIRouter(prefix="/orders", tags=["orders"])


# --- Service providers ---


def get_cart_service() -> CartService:
    stores = get_stores()
    return CartService(stores.carts, stores.products, currency=get_settings().currency)


def get_checkout_service() -> CheckoutService:
    stores = get_stores()
    settings = get_settings()
    return CheckoutService(
        carts=CartService(stores.carts, stores.products, currency=settings.currency),
        orders=stores.orders,
        sessions=stores.checkout_sessions,
        gateway=get_gateway(),
        currency=settings.currency,
        success_url=settings.checkout_success_url,
        cancel_url=settings.checkout_cancel_url,
    )


def get_order_history() -> OrderHistory:
    return OrderHistory(get_stores().orders)


# --- Serializers ---


def _cart_response(contents: CartContents) -> CartResponse:
    return CartResponse(
        items=[
            CartLineResponse(
                product_id=line.product_id,
                title=line.title,
                description=line.description,
                image_url=line.image_url,
                price=line.price,
                quantity=line.quantity,
                subtotal=line.subtotal,
            )
            for line in contents.lines
        ],
        total=contents.total,
    )


def _session_response(session: CheckoutSession) -> CheckoutSessionResponse:
    return CheckoutSessionResponse(
        session_id=str(session.session_id),
        checkout_url=session.checkout_url,
        total=session.total_amount,
        currency=session.currency,
        status=session.status,
    )


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        email=order.email,
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                title=item.title,
                description=item.description or "",
                image_url=item.image_url or "",
                price=to_amount(item.price, order.currency),
                quantity=item.quantity,
                subtotal=item.subtotal(order.currency),
            )
            for item in order.items
        ],
        total=order.items_total(),
        currency=order.currency,
        created_at=order.created_at,
    )


# --- Cart endpoints ---


@cart_router.get("", response_model=CartResponse)
async def view_cart(
    user: AuthenticatedUser = Depends(current_user),
    carts: CartService = Depends(get_cart_service),
) -> CartResponse:
    return _cart_response(carts.view(user))


@cart_router.post("", response_model=CartResponse)
async def add_to_cart(
    body: AddToCartRequest,
    user: AuthenticatedUser = Depends(current_user),
    carts: CartService = Depends(get_cart_service),
) -> CartResponse:
    return _cart_response(carts.add_product(user, body.product_id))


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_from_cart(
    product_id: str,
    user: AuthenticatedUser = Depends(current_user),
    carts: CartService = Depends(get_cart_service),
) -> CartResponse:
    return _cart_response(carts.remove_product(user, product_id))


# --- Checkout endpoints ---


@checkout_router.post("", status_code=201, response_model=CheckoutSessionResponse)
async def begin_checkout(
    user: AuthenticatedUser = Depends(current_user),
    checkout: CheckoutService = Depends(get_checkout_service),
) -> CheckoutSessionResponse:
    return _session_response(checkout.begin(user))


@checkout_router.get("/success", response_model=OrderResponse)
async def checkout_success(
    session_id: str = Query(..., min_length=1),
    user: AuthenticatedUser = Depends(current_user),
    checkout: CheckoutService = Depends(get_checkout_service),
) -> OrderResponse:
    return _order_response(checkout.complete(user, session_id))


@checkout_router.get("/cancel", response_model=CheckoutSessionResponse | None)
async def checkout_cancel(
    session_id: str | None = Query(None),
    user: AuthenticatedUser = Depends(current_user),
    checkout: CheckoutService = Depends(get_checkout_service),
) -> CheckoutSessionResponse | None:
    # The provider's cancel redirect carries no session id
    if not session_id:
        return None
    return _session_response(checkout.cancel(user, session_id))


# --- Order endpoints ---


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(
    user: AuthenticatedUser = Depends(current_user),
    history: OrderHistory = Depends(get_order_history),
) -> list[OrderResponse]:
    return [_order_response(order) for order in history.list_orders(user)]

