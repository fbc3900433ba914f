"""
Unit tests for the MongoDB-backed employee directory and connection manager.

The motor collection is mocked; no database is needed.
"""
import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError, ServerSelectionTimeoutError

from bizhub.config import Settings, db_manager, settings
from bizhub.employees import EmployeeDirectory
from bizhub.rbac.errors import UpstreamFailure


def run(coro):
    return asyncio.run(coro)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def cursor():
    """Aggregation cursor whose to_list() is awaitable."""
    cur = MagicMock()
    cur.to_list = AsyncMock(return_value=[])
    return cur


@pytest.fixture
def collection(cursor):
    coll = MagicMock()
    coll.aggregate = MagicMock(return_value=cursor)
    coll.update_one = AsyncMock()
    return coll


@pytest.fixture
def db(collection):
    database = MagicMock()
    database.__getitem__.return_value = collection
    return database


@pytest.fixture
def directory(db):
    return EmployeeDirectory(db, config=Settings(employees_collection="staff", roles_collection="staff_roles"))


def _employee_doc(**overrides):
    doc = {
        "_id": ObjectId(),
        "id": "emp-1",
        "name": "Nguyễn Văn A",
        "email": "a@amtsc.vn",
        "role_id": "role-sales",
        "is_active": True,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "role": {
            "_id": ObjectId(),
            "id": "role-sales",
            "name": "sales",
            "permissions": ["customers:view"],
        },
    }
    doc.update(overrides)
    return doc


# =============================================================================
# find_with_role
# =============================================================================

class TestFindWithRole:
    """Tests for the employee + role aggregation."""

    def test_uses_configured_collection(self, directory, db):
        db.__getitem__.assert_called_with("staff")

    def test_pipeline_contents(self, directory, collection):
        run(directory.find_with_role("emp-1"))

        pipeline = collection.aggregate.call_args.args[0]
        assert pipeline[0] == {"$match": {"id": "emp-1"}}
        assert pipeline[1] == {"$limit": 1}
        assert pipeline[2] == {
            "$lookup": {
                "from": "staff_roles",
                "localField": "role_id",
                "foreignField": "id",
                "as": "role",
            }
        }
        assert pipeline[3] == {"$unwind": {"path": "$role", "preserveNullAndEmptyArrays": True}}

    def test_missing_employee_is_none(self, directory):
        assert run(directory.find_with_role("ghost")) is None

    def test_strips_object_ids(self, directory, cursor):
        cursor.to_list.return_value = [_employee_doc()]

        record = run(directory.find_with_role("emp-1"))

        assert "_id" not in record
        assert "_id" not in record["role"]
        assert record["role"]["name"] == "sales"
        assert record["created_at"] == "2024-01-01T00:00:00+00:00"

    def test_employee_without_role_row(self, directory, cursor):
        doc = _employee_doc(role_id="role-deleted")
        del doc["role"]
        cursor.to_list.return_value = [doc]

        record = run(directory.find_with_role("emp-1"))

        assert record["id"] == "emp-1"
        assert "role" not in record

    def test_driver_error_becomes_upstream_failure(self, directory, cursor):
        cursor.to_list.side_effect = ServerSelectionTimeoutError("no servers")

        with pytest.raises(UpstreamFailure) as exc:
            run(directory.find_with_role("emp-1"))
        assert exc.value.status_code == 500


# =============================================================================
# touch_last_login
# =============================================================================

class TestTouchLastLogin:
    def test_sets_timestamp(self, directory, collection):
        run(directory.touch_last_login("emp-1"))

        query, update = collection.update_one.call_args.args
        assert query == {"id": "emp-1"}
        assert isinstance(update["$set"]["last_login"], datetime)

    def test_driver_error_becomes_upstream_failure(self, directory, collection):
        collection.update_one.side_effect = PyMongoError("write failed")

        with pytest.raises(UpstreamFailure):
            run(directory.touch_last_login("emp-1"))


# =============================================================================
# DatabaseManager
# =============================================================================

class TestDatabaseManager:
    def test_refuses_to_connect_without_uri(self, monkeypatch):
        client_cls = MagicMock()
        monkeypatch.setattr("bizhub.config.database.AsyncIOMotorClient", client_cls)
        monkeypatch.setattr(settings, "mongodb_uri", None)

        with pytest.raises(RuntimeError, match="MONGODB_URI"):
            run(db_manager.connect())
        client_cls.assert_not_called()
        assert db_manager.is_connected is False
