"""
Custom exceptions and error handlers for consistent error responses.

Every error leaves the API as ``{"error": ..., "code": ..., "details": ...}``.
Domain code raises the not-found exceptions below; the handlers registered
in ``main.py`` translate them into HTTP responses.
"""

import logging
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None, error_code: str = "NOT_FOUND"):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class HumanNotFoundError(ResourceNotFoundError):
    """Raised when an expression references a nonexistent human."""

    def __init__(self, human_id: Any = None):
        super().__init__("Human", human_id, error_code="HUMAN_NOT_FOUND")


class ActivityNotFoundError(ResourceNotFoundError):
    """Raised when an expression references a nonexistent activity."""

    def __init__(self, activity_id: Any = None):
        super().__init__("Activity", activity_id, error_code="ACTIVITY_NOT_FOUND")


class RouteInterestNotFoundError(ResourceNotFoundError):

    def __init__(self, route_interest_id: Any = None):
        super().__init__("Route interest", route_interest_id, error_code="ROUTE_INTEREST_NOT_FOUND")


class RouteExpressionNotFoundError(ResourceNotFoundError):

    def __init__(self, expression_id: Any = None):
        super().__init__(
            "Route interest expression", expression_id, error_code="ROUTE_EXPRESSION_NOT_FOUND"
        )


class GeoInterestNotFoundError(ResourceNotFoundError):

    def __init__(self, geo_interest_id: Any = None):
        super().__init__("Geo-interest", geo_interest_id, error_code="GEO_INTEREST_NOT_FOUND")


def error_body(message: str, code: str, details: Dict[str, Any] = None) -> Dict[str, Any]:
    return {"error": message, "code": code, "details": details or {}}


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.error_code, exc.details)
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    # Map status code to error code
    error_code_map = {
        400: "BAD_REQUEST",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
        500: "INTERNAL_ERROR"
    }

    error_code = error_code_map.get(exc.status_code, "UNKNOWN_ERROR")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), error_code)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body(
            "Validation failed",
            "VALIDATION_ERROR",
            {"errors": jsonable_errors(exc)}
        )
    )


async def integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """
    Handler for constraint violations raised by the store.

    Typical causes: a dangling foreign key passed straight through
    (route_interest_id, activity_id) or two writers racing on a display id.
    """
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=error_body("Request conflicts with stored data", "INTEGRITY_ERROR")
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled exception: %s", type(exc).__name__)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", "INTERNAL_ERROR")
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry the raw ValueError from a model validator
    errors = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {key: str(value) for key, value in err["ctx"].items()}
        errors.append(err)
    return errors
