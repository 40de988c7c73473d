"""
Domain exceptions and the FastAPI handlers that render them.

Services raise the domain exceptions below; endpoints let them propagate and the
handlers registered in siteops.main turn them into the error envelope
``{"success": false, "message": ..., "code": ..., "details": {...}}``.
"""
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from siteops.core.logging import get_logger

logger = get_logger("exceptions")


class DomainException(Exception):
    """Base exception for all domain errors."""

    status_code = 400

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "DOMAIN_ERROR"
        self.details = details or {}


class ValidationException(DomainException):
    """Malformed identifier, out-of-range value or illegal enum combination."""

    status_code = 422

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={"field": field, "value": str(value) if value is not None else None}
        )
        self.field = field


class NotFoundException(DomainException):
    """Raised when a referenced entity does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            message=f"{entity} with id '{entity_id}' not found",
            code="NOT_FOUND",
            details={"entity": entity, "entity_id": str(entity_id)}
        )
        self.entity = entity


class ConflictException(DomainException):
    """Raised when a unique identifier is already taken."""

    status_code = 409

    def __init__(self, entity: str, field: str, value: Any):
        super().__init__(
            message=f"{entity} with {field} '{value}' already exists",
            code="CONFLICT",
            details={"entity": entity, "field": field, "value": str(value)}
        )
        self.field = field


class PartialFailureException(DomainException):
    """
    The first write of a two-document operation committed and the second failed.

    ``committed`` maps entity names to the ids that were already persisted. Nothing
    is rolled back; the caller decides whether to retry the second write.
    """

    status_code = 500

    def __init__(self, message: str, committed: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code="PARTIAL_FAILURE",
            details={"committed": committed or {}}
        )
        self.committed = committed or {}


def _error_body(message: str, code: str, details: Optional[Dict[str, Any]] = None) -> dict:
    return {
        "success": False,
        "message": message,
        "code": code,
        "details": details or {},
    }


def domain_exception_handler(request: Request, exc: DomainException):
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}", exc_info=exc)
    else:
        logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, exc.code, exc.details),
    )


def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"HTTP Exception: {exc.status_code} - {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail), "HTTP_ERROR"),
        headers=getattr(exc, "headers", None),
    )


def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation Error: {exc.errors()}")
    errors = [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content=_error_body("Validation error", "VALIDATION_ERROR", {"errors": errors}),
    )


def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=_error_body("Internal server error", "INTERNAL_ERROR"),
    )
