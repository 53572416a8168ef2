"""
FastAPI Application Entry Point.

This is the main application file for the Humans CRM Backend.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError
from crm_backend.app.core.config import settings
from crm_backend.app.core.observability import ObservabilityMiddleware, setup_logging
from crm_backend.app.api.v1.router import router as api_v1_router
from crm_backend.app.domain.route_interests.city_autocomplete import configure_collation
from crm_backend.app.db.session import engine, Base
from crm_backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    integrity_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from crm_backend.app.models.human import Human
from crm_backend.app.models.activity import Activity
from crm_backend.app.models.display_id_counter import DisplayIdCounter
from crm_backend.app.models.route_interest import RouteInterest
from crm_backend.app.models.route_interest_expression import RouteInterestExpression
from crm_backend.app.models.geo_interest import GeoInterest

setup_logging(settings.log_level)
configure_collation(settings.collation_locale)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Creates database tables on startup.
    2. Disposes the engine's connection pool on shutdown.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()

# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="CRM backend: route interests, expressions and city autocomplete",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(IntegrityError, integrity_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API documentation links
    """
    return {
        "message": "Welcome to Humans CRM Backend API",
        "docs": "/docs",
        "health": "/health",
    }
