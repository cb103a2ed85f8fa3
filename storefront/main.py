"""
Storefront API - Main FastAPI Application
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront import __version__
from storefront.api import (
    addresses,
    auth,
    cart,
    categories,
    orders,
    payment_methods,
    products,
    reviews,
    shipping_methods,
    users,
    wishlist,
)
from storefront.cache import caches
from storefront.common_instrumentation import (
    instrument_fastapi,
    instrument_sqlalchemy,
    setup_opentelemetry,
    shutdown_opentelemetry,
)
from storefront.common_logging import RequestLoggingMiddleware, setup_logging
from storefront.config import settings
from storefront.db.database import check_connection, create_tables, init_database
from storefront.exceptions import StorefrontError
from storefront.gql.schema import graphql_router
from storefront.schemas.common import ApiResponse, FieldError

# Setup logging
setup_logging(
    service_name=settings.service_name,
    log_level=settings.log_level,
    log_format=settings.log_format
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    logger.info(f"Starting {settings.service_name}")
    logger.info(f"Environment: {settings.environment}")

    try:
        engine = init_database(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        create_tables()
        logger.info("Database initialized successfully")

        if settings.otel_enabled:
            instrument_sqlalchemy(engine)

    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise

    if settings.otel_enabled:
        setup_opentelemetry(
            service_name=settings.otel_service_name or settings.service_name,
            otlp_endpoint=settings.otel_endpoint,
            environment=settings.environment,
        )

    logger.info(f"{settings.service_name} started successfully")

    yield

    logger.info(f"Shutting down {settings.service_name}")
    shutdown_opentelemetry()


app = FastAPI(
    title="Storefront API",
    description="E-commerce backend: accounts, catalog, carts, wishlists, reviews and orders",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

if settings.otel_enabled:
    instrument_fastapi(app)

for module in (
    auth, users, categories, products, addresses, payment_methods,
    shipping_methods, reviews, wishlist, cart, orders,
):
    app.include_router(module.router)
app.include_router(graphql_router, prefix="/graphql")


@app.get("/health")
async def health_check():
    """Health check endpoint (liveness probe)"""
    return {
        "status": "healthy",
        "service": settings.service_name,
        "version": __version__,
        "caches": caches.stats(),
        "timestamp": datetime.utcnow().isoformat()
    }


@app.get("/ready")
def readiness_check():
    """Readiness check endpoint (readiness probe)"""
    try:
        check_connection()
        return {
            "status": "ready",
            "service": settings.service_name,
            "database": "connected",
            "timestamp": datetime.utcnow().isoformat()
        }
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "service": settings.service_name,
                "database": "disconnected",
                "error": str(e),
                "timestamp": datetime.utcnow().isoformat()
            }
        )


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.service_name,
        "version": __version__,
        "docs": "/docs",
        "graphql": "/graphql",
        "health": "/health",
        "ready": "/ready"
    }


def _error_response(
    request: Request, status_code: int, message: str, errors: Optional[List[FieldError]] = None
) -> JSONResponse:
    body = ApiResponse.error(message, status_code, path=request.url.path, errors=errors)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body.model_dump(mode="json", by_alias=True)))


@app.exception_handler(StorefrontError)
async def storefront_exception_handler(request: Request, exc: StorefrontError):
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code.value}: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected ({exc.error_code.value}): {exc.message}")
    errors = [FieldError(field=e.field, message=e.message, rejected_value=e.rejected_value) for e in exc.errors]
    return _error_response(request, exc.status_code, exc.message, errors)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        value = error.get("input")
        errors.append(FieldError(
            field=field or "request",
            message=error.get("msg", "Invalid value"),
            rejected_value=value if isinstance(value, (str, int, float, bool)) else None,
        ))
    logger.warning(f"Validation failed for {request.method} {request.url.path}: {len(errors)} error(s)")
    return _error_response(request, 400, "Validation failed", errors)


@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError):
    logger.warning(f"Data integrity violation on {request.url.path}: {exc.orig}")
    return _error_response(request, 409, "Data integrity violation: the request conflicts with existing data")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(request, exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return _error_response(request, 500, "An unexpected error occurred")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
