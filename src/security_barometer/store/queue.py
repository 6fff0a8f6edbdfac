"""QueueStore — the alert_ingestion_queue collection.

Raw payloads are enqueued here as "pending"; the ingestion backend picks them
up and moves them through processing. This service only enqueues and tallies.
"""

from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorDatabase

from security_barometer.model.source import QueueItem, QueueStatus
from security_barometer.queue import queue_status_from_counts

COLLECTION = "alert_ingestion_queue"


class QueueStore:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:  # type: ignore[type-arg]
        self._col = db[COLLECTION]

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("processing_status", 1)])
        await self._col.create_index([("created_at", -1)])

    async def enqueue(self, item: QueueItem) -> str:
        await self._col.insert_one(item.model_dump())
        return item.id

    async def status(self) -> QueueStatus:
        """Count items per processing_status inside Mongo."""
        pipeline = [{"$group": {"_id": "$processing_status", "count": {"$sum": 1}}}]
        counts = {doc["_id"]: doc["count"] async for doc in self._col.aggregate(pipeline)}
        return queue_status_from_counts(counts)
