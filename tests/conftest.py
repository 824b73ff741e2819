"""Shared test fixtures for user service tests."""

import pytest
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from common.storage import BlobStore, Upload
from common.utils.exceptions import DuplicateEmailError, PersistenceError, StorageError
from users.models import FILLABLE, User
from users.repository import UserRepository
from users.services.user_service import UserService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class InMemoryBlobStore(BlobStore):
    """Dict-backed blob store with switchable failures."""

    def __init__(self):
        super().__init__(base_url="http://testserver")
        self.blobs: Dict[str, bytes] = {}
        self.fail_put = False
        self.fail_delete = False

    async def put(self, payload: Upload, namespace: str) -> str:
        if self.fail_put:
            raise StorageError("disk full")
        path = self.generate_path(payload, namespace)
        self.blobs[path] = payload.content
        return path

    async def delete(self, path: str) -> bool:
        if self.fail_delete:
            raise StorageError("disk unavailable")
        return self.blobs.pop(path, None) is not None

    async def exists(self, path: str) -> bool:
        return path in self.blobs

    async def read(self, path: str) -> bytes:
        if path not in self.blobs:
            raise StorageError(f"File not found: {path}")
        return self.blobs[path]


class InMemoryUserRepository(UserRepository):
    """Dict-backed repository enforcing unique emails."""

    def __init__(self):
        self.docs: Dict[str, Dict[str, Any]] = {}
        self.fail_create = False
        self.fail_update = False
        self.fail_refresh = False

    async def create(self, fields: Dict[str, Any]) -> User:
        if self.fail_create:
            raise PersistenceError("database unavailable")
        if await self.email_exists(fields["email"]):
            raise DuplicateEmailError("The email has already been taken.")
        now = datetime.now(timezone.utc)
        doc = {"_id": ObjectId(), "status": None, "image": None, "createdAt": now, "updatedAt": now}
        doc.update({k: v for k, v in fields.items() if k in FILLABLE})
        self.docs[str(doc["_id"])] = doc
        return User.from_document(doc)

    async def update(self, user: User, fields: Dict[str, Any]) -> None:
        if self.fail_update:
            raise PersistenceError("database unavailable")
        if user.id not in self.docs:
            raise PersistenceError(f"User {user.id} does not exist")
        self.docs[user.id].update({k: v for k, v in fields.items() if k in FILLABLE})
        self.docs[user.id]["updatedAt"] = datetime.now(timezone.utc)

    async def refresh(self, user: User) -> User:
        if self.fail_refresh:
            raise PersistenceError("database unavailable")
        if user.id not in self.docs:
            raise PersistenceError(f"User {user.id} does not exist")
        return User.from_document(self.docs[user.id])

    async def delete(self, user: User) -> bool:
        if self.docs.pop(user.id, None) is None:
            raise PersistenceError(f"User {user.id} does not exist")
        return True

    async def get(self, user_id: str) -> Optional[User]:
        doc = self.docs.get(user_id)
        return User.from_document(doc) if doc else None

    async def email_exists(self, email: str, exclude_id: Optional[str] = None) -> bool:
        return any(
            doc["email"] == email and key != exclude_id
            for key, doc in self.docs.items()
        )


@pytest.fixture
def sample_user_id():
    return str(ObjectId())


@pytest.fixture
def png_upload():
    return Upload(content=PNG_BYTES, filename="test.png", content_type="image/png")


@pytest.fixture
def blob_store():
    return InMemoryBlobStore()


@pytest.fixture
def user_repository():
    return InMemoryUserRepository()


@pytest.fixture
def user_service(user_repository, blob_store):
    return UserService(repository=user_repository, blob_store=blob_store)


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously (not a coroutine),
    # so use MagicMock for it. Async methods like find_one, insert_one,
    # count_documents etc. stay as AsyncMock.
    collection.find = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


@pytest.fixture
def sample_user_doc(sample_user_id):
    now = datetime.now(timezone.utc)
    return {
        "_id": ObjectId(sample_user_id),
        "name": "Ann",
        "email": "ann@x.com",
        "status": None,
        "image": None,
        "createdAt": now,
        "updatedAt": now,
    }
