"""
Blob store backed by a local directory.

Blobs are plain files below ``root``; the stored path is the file's
path relative to ``root`` using forward slashes. File I/O goes through
aiofiles so uploads and downloads do not block the event loop.
"""

import logging
from pathlib import Path

import aiofiles
import aiofiles.os

from common.storage.base import BlobStore, Upload
from common.utils.exceptions import StorageError

logger = logging.getLogger(__name__)


class LocalBlobStore(BlobStore):
    """Stores blobs as files on the local filesystem."""

    def __init__(self, root: str, base_url: str = ""):
        """
        Initialize LocalBlobStore.

        Args:
            root: Directory that holds all blobs (created if missing)
            base_url: Public base URL used by url()
        """
        super().__init__(base_url=base_url)
        self._root = Path(root).resolve()
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, path: str) -> Path:
        """Resolve a stored path and make sure it stays within root."""
        if not path or ".." in path.split("/"):
            raise StorageError(f"Invalid blob path: {path!r}")

        resolved = (self._root / path).resolve()
        if not resolved.is_relative_to(self._root):
            raise StorageError(f"Blob path escapes storage root: {path!r}")
        return resolved

    async def put(self, payload: Upload, namespace: str) -> str:
        path = self.generate_path(payload, namespace)
        target = self._resolve(path)

        try:
            await aiofiles.os.makedirs(target.parent, exist_ok=True)
            async with aiofiles.open(target, "wb") as f:
                await f.write(payload.content)
        except OSError as e:
            logger.error(f"Failed to write blob {path}: {e}")
            raise StorageError(f"Failed to store file: {e}") from e

        logger.info(f"Stored blob {path} ({payload.size} bytes)")
        return path

    async def delete(self, path: str) -> bool:
        target = self._resolve(path)

        try:
            await aiofiles.os.remove(target)
        except FileNotFoundError:
            logger.debug(f"Blob already absent: {path}")
            return False
        except OSError as e:
            logger.error(f"Failed to delete blob {path}: {e}")
            raise StorageError(f"Failed to delete file: {e}") from e

        logger.info(f"Deleted blob {path}")
        return True

    async def exists(self, path: str) -> bool:
        try:
            target = self._resolve(path)
        except StorageError:
            return False
        return await aiofiles.os.path.isfile(target)

    async def read(self, path: str) -> bytes:
        target = self._resolve(path)

        try:
            async with aiofiles.open(target, "rb") as f:
                return await f.read()
        except FileNotFoundError as e:
            raise StorageError(f"File not found: {path}") from e
        except OSError as e:
            logger.error(f"Failed to read blob {path}: {e}")
            raise StorageError(f"Failed to read file: {e}") from e
