"""Employee directory: employees joined with their role from MongoDB."""

from datetime import datetime, timezone
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from bizhub.config import Settings, settings as default_settings
from bizhub.rbac.errors import UpstreamFailure
from bizhub.utils import Logger, serialize_mongo_doc

logger = Logger("employees")


class EmployeeDirectory:
    def __init__(self, db: AsyncIOMotorDatabase, config: Settings | None = None):
        self.config = config or default_settings
        self.db = db
        self.employees = db[self.config.employees_collection]

    async def find_with_role(self, employee_id: str) -> Optional[dict[str, Any]]:
        """
        Fetch one employee by id with its role embedded under ``role``
        (None when the employee has no matching role row).

        Any driver error is an UpstreamFailure; no partial result is returned.
        """
        pipeline = [
            {"$match": {"id": employee_id}},
            {"$limit": 1},
            {
                "$lookup": {
                    "from": self.config.roles_collection,
                    "localField": "role_id",
                    "foreignField": "id",
                    "as": "role",
                }
            },
            {"$unwind": {"path": "$role", "preserveNullAndEmptyArrays": True}},
        ]
        try:
            docs = await self.employees.aggregate(pipeline).to_list(length=1)
        except PyMongoError as e:
            logger.error(f"Employee lookup failed for {employee_id}: {e}")
            raise UpstreamFailure(f"Data store error: {e}") from e

        if not docs:
            return None
        doc = serialize_mongo_doc(docs[0])
        doc.pop("_id", None)
        if isinstance(doc.get("role"), dict):
            doc["role"].pop("_id", None)
        return doc

    async def touch_last_login(self, employee_id: str) -> None:
        try:
            await self.employees.update_one(
                {"id": employee_id},
                {"$set": {"last_login": datetime.now(timezone.utc)}},
            )
        except PyMongoError as e:
            raise UpstreamFailure(f"Data store error: {e}") from e
