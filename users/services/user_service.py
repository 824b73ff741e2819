"""
User service for user lifecycle management.

Creates, updates and destroys user records together with their optional
image blob, keeping the blob store and the users collection consistent:
a persisted ``image`` always points at a blob that exists.

Write ordering:
    - store:   upload image -> create record
    - update:  upload new image -> update record -> refresh -> delete old image
    - destroy: delete record -> delete image

A blob uploaded for a write that then fails is deleted again before the
error propagates. Deleting a blob that is no longer referenced is
best-effort and only logged when it fails. The old image of an update is
deleted once the record stops referencing it, even if the refresh fails.
"""

import logging
from typing import Optional

from common.storage import BlobStore
from common.utils.exceptions import PersistenceError, StorageError
from users.models import User, UserFields
from users.repository import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """
    Manages user lifecycle and image attachments.
    """

    DEFAULT_IMAGE_NAMESPACE = "images/users"

    def __init__(
        self,
        repository: UserRepository,
        blob_store: BlobStore,
        image_namespace: str = DEFAULT_IMAGE_NAMESPACE,
    ):
        """
        Initialize UserService.

        Args:
            repository: Persistence for user records
            blob_store: Storage for user images
            image_namespace: Path prefix for uploaded images
        """
        self._repository = repository
        self._blob_store = blob_store
        self._image_namespace = image_namespace

    async def store(self, fields: UserFields) -> User:
        """
        Create a new user.

        Args:
            fields: Validated name, email, optional status and optional image

        Returns:
            Created user, with ``image`` set to the stored path or None

        Raises:
            StorageError: Image upload failed, no record was created
            PersistenceError: Repository rejected the record
        """
        data = fields.provided()
        data.setdefault("status", None)
        data["image"] = None

        if fields.has_image_upload():
            data["image"] = await self._blob_store.put(fields.image, self._image_namespace)

        try:
            user = await self._repository.create(data)
        except PersistenceError:
            if data["image"]:
                await self._discard_blob(data["image"], reason="user creation failed")
            raise

        logger.info(f"User created: {user.id}")
        return user

    async def update(self, fields: UserFields, user: User) -> User:
        """
        Apply a partial update to an existing user.

        Only keys set on ``fields`` are written. A present image with
        content replaces the current one; a present image that is None or
        empty removes it.

        Args:
            fields: Keys to change
            user: Current record, as loaded by the caller

        Returns:
            The user as re-read from the repository after the write

        Raises:
            StorageError: New image upload failed, nothing was changed
            PersistenceError: Repository update or refresh failed
        """
        data = fields.provided()
        new_image: Optional[str] = None

        if "image" in data:
            if fields.has_image_upload():
                new_image = await self._blob_store.put(fields.image, self._image_namespace)
            data["image"] = new_image

        try:
            await self._repository.update(user, data)
        except PersistenceError:
            if new_image:
                await self._discard_blob(new_image, reason=f"update of user {user.id} failed")
            raise

        # The record no longer references the old image, even if the re-read fails
        try:
            updated = await self._repository.refresh(user)
        finally:
            if "image" in data and user.image and user.image != data["image"]:
                await self._discard_blob(user.image, reason=f"image of user {user.id} replaced")

        logger.info(f"User updated: {user.id} ({', '.join(sorted(data)) or 'no fields'})")
        return updated

    async def destroy(self, user: User) -> bool:
        """
        Delete a user and its image.

        Args:
            user: Record to delete

        Returns:
            True once the record is deleted

        Raises:
            PersistenceError: Record deletion failed, including when the
                user was already deleted
        """
        deleted = await self._repository.delete(user)

        if user.image:
            await self._discard_blob(user.image, reason=f"user {user.id} destroyed")

        logger.info(f"User destroyed: {user.id}")
        return deleted

    async def _discard_blob(self, path: str, reason: str) -> None:
        """Delete a blob nothing references any more; failures are logged only."""
        try:
            await self._blob_store.delete(path)
        except StorageError as e:
            logger.warning(f"Orphaned blob {path} left behind ({reason}): {e}")
