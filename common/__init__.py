"""
Common library for reusable infrastructure components.

This package provides generic modules that can be used across projects:

- database: Async MongoDB connection with Motor
- storage: Pluggable blob storage (local disk, GridFS)
- utils: Standard responses and exceptions
- config: Base settings class
"""

from common.database import MongoDB
from common.storage import BlobStore, Upload, LocalBlobStore, GridFSBlobStore
from common.utils import (
    success_response,
    error_response,
    ServiceError,
    ValidationError,
    StorageError,
    PersistenceError,
    DuplicateEmailError,
    APIException,
    NotFoundException,
    ValidationException,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    # Storage
    "BlobStore",
    "Upload",
    "LocalBlobStore",
    "GridFSBlobStore",
    # Utils
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
    # Config
    "BaseAppSettings",
]
