"""
Custom exception handling for CommHub.

This module defines the application's exceptions and the FastAPI handlers
that turn them into the uniform `{"error": ...}` JSON failure body.
"""

import uuid
from typing import Optional, Dict, Any
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

from ..config import settings
from .middleware import get_current_request_id

logger = logging.getLogger(__name__)


# ============================================================================
# Base Exception Classes
# ============================================================================

class CommHubException(Exception):
    """Base exception class for all CommHub errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.correlation_id = get_current_request_id() or str(uuid.uuid4())
        super().__init__(message)


# ============================================================================
# Request Exceptions
# ============================================================================

class ValidationError(CommHubException):
    """Raised when input validation fails."""

    def __init__(self, field: str, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Validation error: {field} - {reason}",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={**(details or {}), "field": field},
        )


# ============================================================================
# Data Source Exceptions
# ============================================================================

class DataSourceError(CommHubException):
    """Raised when rows for an entity cannot be retrieved or validated."""

    def __init__(self, entity: str, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Failed to load {entity}: {reason}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={**(details or {}), "entity": entity},
        )
        self.entity = entity


# ============================================================================
# Output Exceptions
# ============================================================================

class UnsupportedOutputError(CommHubException):
    """Raised when a rendering capability is intentionally unavailable."""

    def __init__(self, output_format: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Output format not supported: {output_format}",
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            details={**(details or {}), "format": output_format},
        )
        self.output_format = output_format


# ============================================================================
# Exception Handlers
# ============================================================================

def _error_response(status_code: int, message: str, correlation_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message},
        headers={**settings.cors_headers, "X-Correlation-ID": correlation_id},
    )


async def commhub_exception_handler(request: Request, exc: CommHubException) -> JSONResponse:
    """
    Generic handler for all CommHubException instances.

    Logs the error with correlation ID and returns `{"error": message}`.
    """
    logger.error(
        f"[{exc.correlation_id}] {exc.__class__.__name__}: {exc.message}",
        extra={
            "correlation_id": exc.correlation_id,
            "status_code": exc.status_code,
            "details": exc.details,
            "path": request.url.path,
            "method": request.method,
        }
    )
    return _error_response(exc.status_code, exc.message, exc.correlation_id)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render pydantic request validation failures as a 400 `{"error": ...}` body."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body") or "body"
    error = ValidationError(field, first.get("msg", "invalid request"))

    logger.warning(
        f"[{error.correlation_id}] Request validation failed: {error.message}",
        extra={"correlation_id": error.correlation_id, "path": request.url.path}
    )
    return _error_response(error.status_code, error.message, error.correlation_id)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Fallback handler for unhandled exceptions.

    Logs the error and returns the exception text as the error message.
    """
    correlation_id = get_current_request_id() or str(uuid.uuid4())

    logger.exception(
        f"[{correlation_id}] Unhandled exception: {str(exc)}",
        extra={
            "correlation_id": correlation_id,
            "path": request.url.path,
            "method": request.method,
        }
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        str(exc) or "Internal server error",
        correlation_id,
    )


# ============================================================================
# Exception Handler Registration
# ============================================================================

def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Register generic handler for all CommHubException instances
    app.add_exception_handler(CommHubException, commhub_exception_handler)

    # Register fallback handler for unhandled exceptions
    app.add_exception_handler(Exception, unhandled_exception_handler)

    logger.info("Exception handlers registered successfully")
