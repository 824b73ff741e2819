"""
Abstract blob store interface.

Defines the contract that all blob storage backends must implement.
This allows swapping between storage services (local disk, GridFS, etc.)
without changing application code.

Example:
    from common.storage import BlobStore, LocalBlobStore, GridFSBlobStore

    def get_blob_store(settings, db) -> BlobStore:
        if settings.STORAGE_BACKEND == "gridfs":
            return GridFSBlobStore(db, bucket_name=settings.STORAGE_BUCKET)
        return LocalBlobStore(root=settings.STORAGE_ROOT)
"""

import mimetypes
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional


@dataclass(frozen=True)
class Upload:
    """Raw file payload handed to a blob store."""

    content: bytes
    filename: Optional[str] = None
    content_type: Optional[str] = None

    def __bool__(self) -> bool:
        return len(self.content) > 0

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        """File extension (with leading dot) guessed from content type, then filename."""
        if self.content_type:
            guessed = mimetypes.guess_extension(self.content_type)
            if guessed:
                return ".jpg" if guessed == ".jpe" else guessed
        if self.filename:
            return PurePosixPath(self.filename).suffix.lower()
        return ""


class BlobStore(ABC):
    """
    Abstract blob store interface.

    Blobs are addressed by string paths relative to the store root,
    e.g. ``images/users/3f9c...e1.png``.
    """

    def __init__(self, base_url: str = ""):
        self._base_url = base_url.rstrip("/")

    @abstractmethod
    async def put(self, payload: Upload, namespace: str) -> str:
        """
        Store a payload under a freshly generated path in ``namespace``.

        Args:
            payload: File content to store
            namespace: Directory-like prefix, e.g. "images/users"

        Returns:
            The stored path

        Raises:
            StorageError: If the backend fails to write the blob
        """
        pass

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """
        Delete a blob.

        Args:
            path: Stored path

        Returns:
            True if a blob was removed, False if nothing existed at path

        Raises:
            StorageError: If the backend fails to delete the blob
        """
        pass

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check whether a blob is stored at ``path``."""
        pass

    @abstractmethod
    async def read(self, path: str) -> bytes:
        """
        Read a blob's content.

        Raises:
            StorageError: If the blob is missing or cannot be read
        """
        pass

    def url(self, path: str) -> str:
        """Public URL under which the API serves ``path``."""
        return f"{self._base_url}/storage/{path}"

    @staticmethod
    def generate_path(payload: Upload, namespace: str) -> str:
        """Build a random, collision-resistant path for a new blob."""
        name = secrets.token_hex(20) + payload.extension
        namespace = namespace.strip("/")
        return f"{namespace}/{name}" if namespace else name
