"""
Storage module - Pluggable blob storage backends.

Usage:
    from common.storage import LocalBlobStore, Upload

    store = LocalBlobStore(root="storage/app/public")
    path = await store.put(Upload(content=data, content_type="image/png"), "images/users")
    await store.exists(path)  # True
"""

from common.storage.base import BlobStore, Upload
from common.storage.local_store import LocalBlobStore
from common.storage.gridfs_store import GridFSBlobStore

__all__ = [
    "BlobStore",
    "Upload",
    "LocalBlobStore",
    "GridFSBlobStore",
]
