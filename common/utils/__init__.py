"""
Utilities module - Common helpers for API responses and exceptions.
"""

from common.utils.responses import success_response, error_response
from common.utils.exceptions import (
    ServiceError,
    ValidationError,
    StorageError,
    PersistenceError,
    DuplicateEmailError,
    APIException,
    NotFoundException,
    ValidationException,
    InternalServerException,
    to_api_exception,
)

__all__ = [
    "success_response",
    "error_response",
    "ServiceError",
    "ValidationError",
    "StorageError",
    "PersistenceError",
    "DuplicateEmailError",
    "APIException",
    "NotFoundException",
    "ValidationException",
    "InternalServerException",
    "to_api_exception",
]
