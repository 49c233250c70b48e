"""Mapping of domain errors onto HTTP responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError
from protean.integrations.fastapi import register_exception_handlers

from storefront.errors import (
    AlreadyPaid,
    DuplicateCategory,
    EmptyCart,
    InsufficientStock,
    InvalidTransition,
    NotFoundError,
    OrderCancelled,
    OrderNumberConflict,
    PaymentDeclined,
    PaymentDetailsInvalid,
    ProductUnavailable,
    StorefrontError,
)

logger = structlog.get_logger(__name__)

_STATUS_CODES = {
    NotFoundError: 404,
    ProductUnavailable: 400,
    InsufficientStock: 400,
    EmptyCart: 400,
    PaymentDetailsInvalid: 400,
    PaymentDeclined: 402,
    InvalidTransition: 409,
    AlreadyPaid: 409,
    OrderCancelled: 409,
    OrderNumberConflict: 409,
    DuplicateCategory: 409,
}


def status_code_for(exc: StorefrontError) -> int:
    for cls in type(exc).__mro__:
        if cls in _STATUS_CODES:
            return _STATUS_CODES[cls]
    return 400


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    status_code = status_code_for(exc)
    logger.warning("request_rejected", path=request.url.path, error=exc.code, status_code=status_code)
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": exc.message, **exc.details},
    )


async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("concurrent_update", path=request.url.path, detail=str(exc))
    return JSONResponse(
        status_code=409,
        content={"error": "concurrent_update", "message": "The record was changed by another request, please retry"},
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "internal_error", "message": "Something went wrong, please try again later"},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's handlers plus the storefront business-error mapping."""
    register_exception_handlers(app)
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(ExpectedVersionError, version_conflict_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
