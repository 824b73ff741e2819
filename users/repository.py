"""
Persistence for user records.

``UserRepository`` is the contract UserService depends on;
``MongoUserRepository`` implements it over the ``users`` collection.
Every failure surfaces as PersistenceError so callers never see driver
exceptions.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from common.utils.exceptions import DuplicateEmailError, PersistenceError
from users.models import FILLABLE, User

logger = logging.getLogger(__name__)


class UserRepository(ABC):
    """Abstract persistence interface for User records."""

    @abstractmethod
    async def create(self, fields: Dict[str, Any]) -> User:
        """
        Insert a new user.

        Raises:
            DuplicateEmailError: Email already used by another user
            PersistenceError: Insert rejected or store unavailable
        """
        pass

    @abstractmethod
    async def update(self, user: User, fields: Dict[str, Any]) -> None:
        """
        Overwrite the given fields of an existing user.

        Keys absent from ``fields`` are left untouched; keys mapped to
        None are cleared.

        Raises:
            PersistenceError: User missing, update rejected or store unavailable
        """
        pass

    @abstractmethod
    async def refresh(self, user: User) -> User:
        """
        Re-read a user from the store.

        Raises:
            PersistenceError: User no longer exists or store unavailable
        """
        pass

    @abstractmethod
    async def delete(self, user: User) -> bool:
        """
        Delete a user.

        Raises:
            PersistenceError: User already deleted or store unavailable
        """
        pass

    @abstractmethod
    async def get(self, user_id: str) -> Optional[User]:
        """Load a user by id, or None if it does not exist."""
        pass

    @abstractmethod
    async def email_exists(self, email: str, exclude_id: Optional[str] = None) -> bool:
        """Check whether any user other than ``exclude_id`` uses ``email``."""
        pass


def _fillable(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in fields.items() if key in FILLABLE}


def _object_id(user: User) -> ObjectId:
    if not ObjectId.is_valid(user.id):
        raise PersistenceError(f"User {user.id} does not exist")
    return ObjectId(user.id)


class MongoUserRepository(UserRepository):
    """UserRepository backed by a MongoDB collection."""

    COLLECTION_NAME = "users"

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize MongoUserRepository.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._collection = db[self.COLLECTION_NAME]

    async def ensure_indexes(self) -> None:
        """Create the unique email index. Safe to call on every startup."""
        try:
            await self._collection.create_index("email", unique=True)
        except PyMongoError as e:
            logger.error(f"Failed to create users indexes: {e}")
            raise PersistenceError(f"Failed to create indexes: {e}") from e

    async def create(self, fields: Dict[str, Any]) -> User:
        now = datetime.now(timezone.utc)
        doc = {
            "name": None,
            "email": None,
            "status": None,
            "image": None,
            **_fillable(fields),
            "createdAt": now,
            "updatedAt": now,
        }

        if not doc["name"] or not doc["email"]:
            raise PersistenceError("name and email are required")

        try:
            result = await self._collection.insert_one(doc)
        except DuplicateKeyError as e:
            raise DuplicateEmailError("The email has already been taken.") from e
        except PyMongoError as e:
            logger.error(f"Failed to insert user: {e}")
            raise PersistenceError(f"Failed to create user: {e}") from e

        doc["_id"] = result.inserted_id
        return User.from_document(doc)

    async def update(self, user: User, fields: Dict[str, Any]) -> None:
        changes = _fillable(fields)

        if "name" in changes and not changes["name"]:
            raise PersistenceError("name cannot be empty")
        if "email" in changes and not changes["email"]:
            raise PersistenceError("email cannot be empty")

        changes["updatedAt"] = datetime.now(timezone.utc)

        try:
            result = await self._collection.update_one(
                {"_id": _object_id(user)},
                {"$set": changes},
            )
        except DuplicateKeyError as e:
            raise DuplicateEmailError("The email has already been taken.") from e
        except PyMongoError as e:
            logger.error(f"Failed to update user {user.id}: {e}")
            raise PersistenceError(f"Failed to update user: {e}") from e

        if result.matched_count == 0:
            raise PersistenceError(f"User {user.id} does not exist")

    async def refresh(self, user: User) -> User:
        try:
            doc = await self._collection.find_one({"_id": _object_id(user)})
        except PyMongoError as e:
            raise PersistenceError(f"Failed to load user: {e}") from e

        if doc is None:
            raise PersistenceError(f"User {user.id} does not exist")
        return User.from_document(doc)

    async def delete(self, user: User) -> bool:
        try:
            result = await self._collection.delete_one({"_id": _object_id(user)})
        except PyMongoError as e:
            logger.error(f"Failed to delete user {user.id}: {e}")
            raise PersistenceError(f"Failed to delete user: {e}") from e

        if result.deleted_count == 0:
            raise PersistenceError(f"User {user.id} does not exist")
        return True

    async def get(self, user_id: str) -> Optional[User]:
        if not ObjectId.is_valid(user_id):
            return None

        try:
            doc = await self._collection.find_one({"_id": ObjectId(user_id)})
        except PyMongoError as e:
            raise PersistenceError(f"Failed to load user: {e}") from e

        return User.from_document(doc) if doc else None

    async def email_exists(self, email: str, exclude_id: Optional[str] = None) -> bool:
        query: Dict[str, Any] = {"email": email}
        if exclude_id and ObjectId.is_valid(exclude_id):
            query["_id"] = {"$ne": ObjectId(exclude_id)}

        try:
            return await self._collection.count_documents(query, limit=1) > 0
        except PyMongoError as e:
            raise PersistenceError(f"Failed to check email: {e}") from e
