"""
Blob store backed by MongoDB GridFS.

Each blob is one GridFS file whose ``filename`` is the stored path.
Keeps images in the same database as the records that reference them.
"""

import logging

from gridfs.errors import NoFile
from motor.motor_asyncio import AsyncIOMotorDatabase, AsyncIOMotorGridFSBucket
from pymongo.errors import PyMongoError

from common.storage.base import BlobStore, Upload
from common.utils.exceptions import StorageError

logger = logging.getLogger(__name__)


class GridFSBlobStore(BlobStore):
    """Stores blobs in a GridFS bucket."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        bucket_name: str = "blobs",
        base_url: str = "",
    ):
        """
        Initialize GridFSBlobStore.

        Args:
            db: MongoDB database connection
            bucket_name: GridFS bucket (collections <bucket>.files / <bucket>.chunks)
            base_url: Public base URL used by url()
        """
        super().__init__(base_url=base_url)
        self._bucket = AsyncIOMotorGridFSBucket(db, bucket_name=bucket_name)
        self._files_collection = db[f"{bucket_name}.files"]

    async def _find_file_id(self, path: str):
        doc = await self._files_collection.find_one({"filename": path}, {"_id": 1})
        return doc["_id"] if doc else None

    async def put(self, payload: Upload, namespace: str) -> str:
        path = self.generate_path(payload, namespace)

        try:
            await self._bucket.upload_from_stream(
                path,
                payload.content,
                metadata={
                    "contentType": payload.content_type,
                    "originalName": payload.filename,
                },
            )
        except PyMongoError as e:
            logger.error(f"Failed to upload blob {path} to GridFS: {e}")
            raise StorageError(f"Failed to store file: {e}") from e

        logger.info(f"Stored blob {path} in GridFS ({payload.size} bytes)")
        return path

    async def delete(self, path: str) -> bool:
        try:
            file_id = await self._find_file_id(path)
            if file_id is None:
                logger.debug(f"Blob already absent: {path}")
                return False
            await self._bucket.delete(file_id)
        except NoFile:
            return False
        except PyMongoError as e:
            logger.error(f"Failed to delete blob {path} from GridFS: {e}")
            raise StorageError(f"Failed to delete file: {e}") from e

        logger.info(f"Deleted blob {path} from GridFS")
        return True

    async def exists(self, path: str) -> bool:
        try:
            return await self._find_file_id(path) is not None
        except PyMongoError as e:
            raise StorageError(f"Failed to look up file: {e}") from e

    async def read(self, path: str) -> bytes:
        try:
            stream = await self._bucket.open_download_stream_by_name(path)
            return await stream.read()
        except NoFile as e:
            raise StorageError(f"File not found: {path}") from e
        except PyMongoError as e:
            logger.error(f"Failed to read blob {path} from GridFS: {e}")
            raise StorageError(f"Failed to read file: {e}") from e
