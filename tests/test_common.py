"""Tests for shared infrastructure: settings, errors, responses, MongoDB manager."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from common.config import BaseAppSettings
from common.database import MongoDB
from common.utils import error_response, success_response
from common.utils.exceptions import (
    DuplicateEmailError,
    PersistenceError,
    StorageError,
    ValidationError,
    to_api_exception,
)


# ─────────────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────────────


class TestSettings:
    def test_defaults_are_valid(self):
        BaseAppSettings().validate_required()

    def test_unknown_storage_backend_is_rejected(self):
        settings = BaseAppSettings(STORAGE_BACKEND="s3")

        with pytest.raises(ValueError, match="STORAGE_BACKEND"):
            settings.validate_required()

    def test_local_backend_needs_root(self):
        settings = BaseAppSettings(STORAGE_BACKEND="local", STORAGE_ROOT=None)

        with pytest.raises(ValueError, match="STORAGE_ROOT"):
            settings.validate_required()

    def test_cors_origins_are_split(self):
        settings = BaseAppSettings(CORS_ORIGINS="http://a.test, http://b.test")

        assert settings.get_cors_origins() == ["http://a.test", "http://b.test"]


# ─────────────────────────────────────────────────────────────────
# Error mapping and responses
# ─────────────────────────────────────────────────────────────────


class TestErrorMapping:
    def test_duplicate_email_maps_to_422(self):
        exc = to_api_exception(DuplicateEmailError("The email has already been taken."))

        assert exc.status_code == 422
        assert exc.detail["code"] == "EMAIL_TAKEN"
        assert exc.detail["details"]["errors"][0]["field"] == "email"

    def test_validation_error_maps_to_422(self):
        assert to_api_exception(ValidationError("bad")).status_code == 422

    @pytest.mark.parametrize("error, code", [
        (StorageError("disk full"), "STORAGE_ERROR"),
        (PersistenceError("db down"), "PERSISTENCE_ERROR"),
    ])
    def test_collaborator_failures_map_to_500(self, error, code):
        exc = to_api_exception(error)

        assert exc.status_code == 500
        assert exc.detail == {"message": error.message, "code": code}

    def test_success_response(self):
        assert success_response({"destroyed": True}) == {"success": True, "data": {"destroyed": True}}

    def test_error_response(self):
        assert error_response("Nope", code="NOPE") == {
            "success": False,
            "error": {"message": "Nope", "code": "NOPE"},
        }


# ─────────────────────────────────────────────────────────────────
# MongoDB manager
# ─────────────────────────────────────────────────────────────────


class TestMongoDB:
    @pytest.mark.asyncio
    async def test_connect_pings_and_disconnect_closes(self):
        client = MagicMock()
        client.admin.command = AsyncMock(return_value={"ok": 1})

        with patch("common.database.mongodb.AsyncIOMotorClient", return_value=client):
            db = MongoDB()
            await db.connect("mongodb://user:secret@db:27017", "user_service")

        client.admin.command.assert_called_once_with("ping")
        assert db.is_connected
        assert db.db is client.__getitem__.return_value
        client.__getitem__.assert_called_with("user_service")

        await db.disconnect()

        client.close.assert_called_once()
        assert not db.is_connected

    @pytest.mark.asyncio
    async def test_failed_ping_propagates(self):
        client = MagicMock()
        client.admin.command = AsyncMock(side_effect=RuntimeError("unreachable"))

        with patch("common.database.mongodb.AsyncIOMotorClient", return_value=client):
            db = MongoDB()
            with pytest.raises(RuntimeError):
                await db.connect("mongodb://db:27017", "user_service")

        assert not db.is_connected

    def test_db_requires_connection(self):
        with pytest.raises(RuntimeError):
            MongoDB().db
