"""Storefront FastAPI application.

Catalogue browsing, cart, hosted checkout, order history, invoices and
session-based authentication served from one process.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.exceptions import ValidationError
from starlette.middleware.sessions import SessionMiddleware

from shared.config import get_settings
from shared.domain import init_domain
from shared.errors import (
    EmptyCart,
    InvalidCredentials,
    NotAuthenticated,
    NotFound,
    PaymentServiceError,
    StoreUnavailable,
    StorefrontError,
    Unauthorized,
    ValidationFailed,
)
from shared.logging import add_context, clear_context, configure_logging

configure_logging()
logger = structlog.get_logger(__name__)

settings = get_settings()
storefront = init_domain()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="E-commerce storefront — catalogue, cart, checkout, orders and invoices",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie="storefront_session",
    same_site="lax",
    https_only=settings.is_production,
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Bind a request id and path to every log line emitted while handling the request."""
    clear_context()
    add_context(request_id=request.headers.get("x-request-id", uuid4().hex), path=request.url.path)
    try:
        return await call_next(request)
    finally:
        clear_context()


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context for each request."""
    with storefront.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------
_STATUS_CODES = {
    NotFound: 404,
    Unauthorized: 403,
    NotAuthenticated: 401,
    InvalidCredentials: 401,
    EmptyCart: 400,
    ValidationFailed: 422,
}


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    if isinstance(exc, (PaymentServiceError, StoreUnavailable)):
        logger.error(
            "Request failed",
            error_type=type(exc).__name__,
            error=exc.message,
            method=request.method,
            **exc.context,
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    status_code = next((code for cls, code in _STATUS_CODES.items() if isinstance(exc, cls)), 409)
    logger.info(
        "Request rejected",
        error_type=type(exc).__name__,
        error=exc.message,
        status_code=status_code,
        **exc.context,
    )
    content = {"detail": exc.message}
    if isinstance(exc, ValidationFailed):
        content["errors"] = exc.errors
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(ValidationError)
async def domain_validation_handler(request: Request, exc: ValidationError):
    """Aggregate validation failures (e.g. a blank product title) are input errors."""
    errors = {field: "; ".join(str(m) for m in messages) for field, messages in exc.messages.items()}
    return JSONResponse(status_code=422, content={"detail": "Validation failed", "errors": errors})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = {".".join(str(part) for part in error["loc"]): error["msg"] for error in exc.errors()}
    return JSONResponse(status_code=422, content={"detail": "Validation failed", "errors": errors})


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from catalogue.api import admin_router, product_router  # noqa: E402
from identity.api import router as identity_router  # noqa: E402
from ordering.api import cart_router, checkout_router, order_router  # noqa: E402
from payments.api import invoice_router  # noqa: E402

app.include_router(identity_router)
app.include_router(product_router)
app.include_router(admin_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(order_router)
app.include_router(invoice_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "env": settings.env})
