"""Unit tests for MongoUserRepository against a mocked Motor collection."""

import pytest
from unittest.mock import MagicMock
from bson import ObjectId
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from common.utils.exceptions import DuplicateEmailError, PersistenceError
from users.models import User
from users.repository import MongoUserRepository


@pytest.fixture
def repository(mock_db):
    return MongoUserRepository(mock_db)


@pytest.fixture
def sample_user(sample_user_doc):
    return User.from_document(sample_user_doc)


# ─────────────────────────────────────────────────────────────────
# create
# ─────────────────────────────────────────────────────────────────


class TestCreate:
    @pytest.mark.asyncio
    async def test_inserts_fillable_fields_with_timestamps(self, repository, mock_collection):
        inserted_id = ObjectId()
        mock_collection.insert_one.return_value = MagicMock(inserted_id=inserted_id)

        user = await repository.create({
            "name": "Ann",
            "email": "ann@x.com",
            "status": None,
            "image": None,
            "is_admin": True,
        })

        doc = mock_collection.insert_one.call_args[0][0]
        assert doc["name"] == "Ann"
        assert doc["email"] == "ann@x.com"
        assert doc["status"] is None
        assert doc["image"] is None
        assert "is_admin" not in doc
        assert doc["createdAt"] == doc["updatedAt"]
        assert user.id == str(inserted_id)
        assert user.created_at is not None

    @pytest.mark.asyncio
    async def test_duplicate_key_raises_duplicate_email(self, repository, mock_collection):
        mock_collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")

        with pytest.raises(DuplicateEmailError):
            await repository.create({"name": "Ann", "email": "ann@x.com"})

    @pytest.mark.asyncio
    async def test_driver_error_raises_persistence_error(self, repository, mock_collection):
        mock_collection.insert_one.side_effect = ServerSelectionTimeoutError("no servers")

        with pytest.raises(PersistenceError):
            await repository.create({"name": "Ann", "email": "ann@x.com"})

    @pytest.mark.asyncio
    async def test_missing_required_field_is_rejected(self, repository, mock_collection):
        with pytest.raises(PersistenceError):
            await repository.create({"email": "ann@x.com"})

        mock_collection.insert_one.assert_not_called()


# ─────────────────────────────────────────────────────────────────
# update / refresh
# ─────────────────────────────────────────────────────────────────


class TestUpdate:
    @pytest.mark.asyncio
    async def test_sets_only_given_fields(self, repository, mock_collection, sample_user):
        mock_collection.update_one.return_value = MagicMock(matched_count=1)

        await repository.update(sample_user, {"status": None})

        query, update = mock_collection.update_one.call_args[0]
        assert query == {"_id": ObjectId(sample_user.id)}
        assert set(update["$set"]) == {"status", "updatedAt"}
        assert update["$set"]["status"] is None

    @pytest.mark.asyncio
    async def test_missing_user_raises(self, repository, mock_collection, sample_user):
        mock_collection.update_one.return_value = MagicMock(matched_count=0)

        with pytest.raises(PersistenceError):
            await repository.update(sample_user, {"name": "Anna"})

    @pytest.mark.asyncio
    async def test_null_name_is_rejected(self, repository, mock_collection, sample_user):
        with pytest.raises(PersistenceError):
            await repository.update(sample_user, {"name": None})

        mock_collection.update_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_refresh_reads_current_document(
        self, repository, mock_collection, sample_user, sample_user_doc,
    ):
        mock_collection.find_one.return_value = {**sample_user_doc, "status": "active"}

        refreshed = await repository.refresh(sample_user)

        assert refreshed.status == "active"
        mock_collection.find_one.assert_called_once_with({"_id": ObjectId(sample_user.id)})

    @pytest.mark.asyncio
    async def test_refresh_of_deleted_user_raises(self, repository, mock_collection, sample_user):
        mock_collection.find_one.return_value = None

        with pytest.raises(PersistenceError):
            await repository.refresh(sample_user)


# ─────────────────────────────────────────────────────────────────
# delete / lookups
# ─────────────────────────────────────────────────────────────────


class TestDeleteAndLookup:
    @pytest.mark.asyncio
    async def test_delete_returns_true(self, repository, mock_collection, sample_user):
        mock_collection.delete_one.return_value = MagicMock(deleted_count=1)

        assert await repository.delete(sample_user) is True

    @pytest.mark.asyncio
    async def test_delete_of_missing_user_raises(self, repository, mock_collection, sample_user):
        mock_collection.delete_one.return_value = MagicMock(deleted_count=0)

        with pytest.raises(PersistenceError):
            await repository.delete(sample_user)

    @pytest.mark.asyncio
    async def test_malformed_id_raises_persistence_error(
        self, repository, mock_collection, sample_user,
    ):
        user = sample_user.model_copy(update={"id": "not-an-id"})

        with pytest.raises(PersistenceError):
            await repository.update(user, {"name": "Bob"})
        with pytest.raises(PersistenceError):
            await repository.refresh(user)
        with pytest.raises(PersistenceError):
            await repository.delete(user)

        mock_collection.update_one.assert_not_called()
        mock_collection.find_one.assert_not_called()
        mock_collection.delete_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_with_malformed_id_returns_none(self, repository, mock_collection):
        assert await repository.get("not-an-id") is None
        mock_collection.find_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_returns_user(self, repository, mock_collection, sample_user_doc):
        mock_collection.find_one.return_value = sample_user_doc

        user = await repository.get(str(sample_user_doc["_id"]))

        assert user.email == "ann@x.com"

    @pytest.mark.asyncio
    async def test_email_exists_excludes_given_user(
        self, repository, mock_collection, sample_user_id,
    ):
        mock_collection.count_documents.return_value = 0

        assert await repository.email_exists("ann@x.com", exclude_id=sample_user_id) is False

        query = mock_collection.count_documents.call_args[0][0]
        assert query == {"email": "ann@x.com", "_id": {"$ne": ObjectId(sample_user_id)}}

    @pytest.mark.asyncio
    async def test_ensure_indexes_creates_unique_email_index(self, repository, mock_collection):
        await repository.ensure_indexes()

        mock_collection.create_index.assert_called_once_with("email", unique=True)
