"""SourceStore — async Motor CRUD for the alert_sources collection.

Sources are created by an administrator and updated on every poll; nothing
here deletes them.
"""

from __future__ import annotations

from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorDatabase

from security_barometer.model.source import AlertSource, HealthStatus

COLLECTION = "alert_sources"


class SourceStore:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:  # type: ignore[type-arg]
        self._col = db[COLLECTION]

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("id", 1)], unique=True)
        await self._col.create_index([("name", 1)])
        await self._col.create_index([("is_active", 1)])

    async def insert(self, source: AlertSource) -> str:
        await self._col.insert_one(source.model_dump())
        return source.id

    async def get_by_id(self, source_id: str) -> AlertSource | None:
        doc = await self._col.find_one({"id": source_id}, {"_id": 0})
        return AlertSource(**doc) if doc else None

    async def list_sources(self, active_only: bool = False) -> list[AlertSource]:
        query = {"is_active": True} if active_only else {}
        cursor = self._col.find(query, {"_id": 0}).sort("name", 1)
        return [AlertSource(**doc) async for doc in cursor]

    async def set_active(self, source_id: str, is_active: bool) -> bool:
        result = await self._col.update_one(
            {"id": source_id},
            {"$set": {"is_active": is_active, "updated_at": datetime.now(tz=timezone.utc)}},
        )
        return result.matched_count == 1

    async def record_poll(
        self, source_id: str, polled_at: datetime, health_status: HealthStatus
    ) -> None:
        await self._col.update_one(
            {"id": source_id},
            {
                "$set": {
                    "last_poll_at": polled_at,
                    "health_status": health_status,
                    "updated_at": polled_at,
                }
            },
        )
