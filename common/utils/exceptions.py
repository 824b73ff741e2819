"""
Error types shared across the service.

Two families live here:

- Domain errors (``ServiceError`` and subclasses) raised by services,
  repositories and blob stores. They carry no HTTP semantics.
- HTTP exceptions (``APIException`` and subclasses) extending FastAPI's
  HTTPException with standardized error codes for consistent API error
  responses.

Example:
    from common.utils import NotFoundException

    @app.get("/users/{id}")
    async def get_user(id: str):
        user = await repository.get(id)
        if not user:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        return user
"""

from typing import Optional, Any, Dict
from fastapi import HTTPException


# ─────────────────────────────────────────────────────────────────
# Domain errors
# ─────────────────────────────────────────────────────────────────


class ServiceError(Exception):
    """Base class for errors raised below the HTTP layer."""

    code = "SERVICE_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ServiceError):
    """Input failed validation before reaching a service."""

    code = "VALIDATION_ERROR"


class StorageError(ServiceError):
    """A blob store put, read or delete failed."""

    code = "STORAGE_ERROR"


class PersistenceError(ServiceError):
    """The record store rejected an operation or is unavailable."""

    code = "PERSISTENCE_ERROR"


class DuplicateEmailError(PersistenceError):
    """A user with the same email already exists."""

    code = "EMAIL_TAKEN"


# ─────────────────────────────────────────────────────────────────
# HTTP exceptions
# ─────────────────────────────────────────────────────────────────


class APIException(HTTPException):
    """
    Base API exception with error code support.

    Provides consistent error response format across the API.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Create an API exception.

        Args:
            status_code: HTTP status code
            message: Human-readable error message
            code: Machine-readable error code
            details: Additional error details
            headers: Optional response headers
        """
        self.message = message
        self.code = code
        self.details = details
        self.errors: Optional[list] = None

        detail: Dict[str, Any] = {"message": message}

        if code:
            detail["code"] = code

        if details is not None:
            detail["details"] = details

        super().__init__(
            status_code=status_code,
            detail=detail,
            headers=headers,
        )


class NotFoundException(APIException):
    """404 Not Found - Resource doesn't exist."""

    def __init__(
        self,
        message: str = "Not found",
        code: str = "NOT_FOUND",
        details: Optional[Any] = None,
    ):
        super().__init__(404, message, code, details)


class ValidationException(APIException):
    """422 Validation Error - Request validation failed."""

    def __init__(
        self,
        message: str = "Validation error",
        code: str = "VALIDATION_ERROR",
        details: Optional[Any] = None,
        errors: Optional[list] = None,
    ):
        detail_info = details
        if errors:
            detail_info = {"errors": errors, **(details or {})}
        super().__init__(422, message, code, detail_info)
        self.details = details
        self.errors = errors


class InternalServerException(APIException):
    """500 Internal Server Error - Unexpected server error."""

    def __init__(
        self,
        message: str = "Internal server error",
        code: str = "INTERNAL_ERROR",
        details: Optional[Any] = None,
    ):
        super().__init__(500, message, code, details)


def to_api_exception(error: ServiceError) -> APIException:
    """
    Map a domain error onto the HTTP exception the API should raise.

    Args:
        error: Domain error raised by a service or collaborator

    Returns:
        APIException carrying the matching status code and error code
    """
    if isinstance(error, DuplicateEmailError):
        return ValidationException(
            message=error.message,
            code=error.code,
            errors=[{"field": "email", "message": error.message}],
        )
    if isinstance(error, ValidationError):
        return ValidationException(message=error.message, code=error.code, details=error.details)
    return InternalServerException(message=error.message, code=error.code)
