"""HealthMetricStore — append-only source_health_metrics collection."""

from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorDatabase

from security_barometer.model.source import SourceHealthMetric

COLLECTION = "source_health_metrics"


class HealthMetricStore:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:  # type: ignore[type-arg]
        self._col = db[COLLECTION]

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("source_id", 1), ("timestamp", -1)])
        await self._col.create_index([("timestamp", -1)])

    async def insert(self, metric: SourceHealthMetric) -> str:
        await self._col.insert_one(metric.model_dump())
        return metric.id

    async def recent(self, source_id: str | None = None, limit: int = 100) -> list[SourceHealthMetric]:
        """Newest-first metrics, optionally for one source."""
        query = {"source_id": source_id} if source_id else {}
        cursor = self._col.find(query, {"_id": 0}).sort("timestamp", -1).limit(limit)
        return [SourceHealthMetric(**doc) async for doc in cursor]
