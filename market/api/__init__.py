# market/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from market.api.routers import carts, health, orders, products
from market.domain.errors import (
    ConcurrentModification,
    EmptyCart,
    Forbidden,
    InsufficientStock,
    InternalFailure,
    InvalidArgument,
    MarketError,
    NotFound,
    OutOfStock,
    TrackingNumberConflict,
    Unauthorized,
)
from market.utils.logging import get_logger

logger = get_logger(__name__)

# Map exception types to HTTP status codes
ERROR_STATUS_CODES: dict[type, int] = {
    NotFound: 404,
    InvalidArgument: 400,
    OutOfStock: 400,
    EmptyCart: 400,
    InsufficientStock: 409,
    Unauthorized: 401,
    Forbidden: 403,
    ConcurrentModification: 409,
    InternalFailure: 500,
    TrackingNumberConflict: 500,
}


def error_body(message: str, details: list[str] | None = None) -> dict:
    body = {"error": message}
    if details:
        body["details"] = details
    return body


async def market_error_handler(request: Request, exc: MarketError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=status_code, content=error_body(exc.message, exc.details))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        msg = err.get("msg", "invalid value")
        details.append(f"{loc}: {msg}" if loc else msg)
    return JSONResponse(status_code=400, content=error_body("Validation failed", details))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = "Route not found"
    return JSONResponse(status_code=exc.status_code, content=error_body(message))


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} store failure: {exc}")
    return JSONResponse(status_code=500, content=error_body("Store unavailable"))


def create_app() -> FastAPI:
    app = FastAPI(
        title="Market Service",
        version="1.0.0",
    )

    app.add_exception_handler(MarketError, market_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app
