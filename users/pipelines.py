"""
User pipeline functions.

Stateless orchestration between the HTTP layer and UserService:
record lookup, email uniqueness pre-checks and response shaping.
"""

import logging

from common.storage import BlobStore
from common.utils.exceptions import DuplicateEmailError, NotFoundException, StorageError
from users.models import User, UserFields
from users.repository import UserRepository
from users.services.user_service import UserService

logger = logging.getLogger(__name__)


async def load_user_pipeline(repository: UserRepository, user_id: str) -> User:
    """
    Load a user or fail with 404.

    Args:
        repository: For user lookup
        user_id: MongoDB user ID

    Returns:
        The user record

    Raises:
        NotFoundException: No user with that ID
    """
    user = await repository.get(user_id)
    if user is None:
        raise NotFoundException(message="User not found", code="USER_NOT_FOUND")
    return user


async def store_user_pipeline(
    user_service: UserService,
    repository: UserRepository,
    fields: UserFields,
) -> User:
    """
    Create a user after checking the email is free.

    The unique index on email remains the final authority; this check
    only lets the common case fail before an image is uploaded.

    Raises:
        DuplicateEmailError: Email already taken
    """
    if await repository.email_exists(fields.email):
        raise DuplicateEmailError("The email has already been taken.")

    return await user_service.store(fields)


async def update_user_pipeline(
    user_service: UserService,
    repository: UserRepository,
    user_id: str,
    fields: UserFields,
) -> User:
    """Apply a partial update to the user with ``user_id``."""
    user = await load_user_pipeline(repository, user_id)
    return await user_service.update(fields, user)


async def destroy_user_pipeline(
    user_service: UserService,
    repository: UserRepository,
    user_id: str,
) -> dict:
    """
    Delete the user with ``user_id`` and its image.

    Returns:
        Dict with destroyed flag
    """
    user = await load_user_pipeline(repository, user_id)
    destroyed = await user_service.destroy(user)
    return {"destroyed": destroyed}


async def read_blob_pipeline(blob_store: BlobStore, path: str) -> bytes:
    """
    Read a stored blob for download.

    Raises:
        NotFoundException: Nothing stored at ``path``
    """
    if not await blob_store.exists(path):
        raise NotFoundException(message="File not found", code="FILE_NOT_FOUND")

    try:
        return await blob_store.read(path)
    except StorageError as e:
        logger.warning(f"Blob {path} vanished while reading: {e}")
        raise NotFoundException(message="File not found", code="FILE_NOT_FOUND")
