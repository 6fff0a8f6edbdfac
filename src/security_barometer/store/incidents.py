"""IncidentStore — async Motor CRUD for the incidents collection.

`external_key` carries a unique sparse index, so at most one incident can
exist per promoted external alert even when two promotions race.
"""

from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from security_barometer.model.incident import Incident

COLLECTION = "incidents"


class IncidentStore:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:  # type: ignore[type-arg]
        self._col = db[COLLECTION]

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("id", 1)], unique=True)
        await self._col.create_index([("external_key", 1)], unique=True, sparse=True)
        await self._col.create_index([("created_at", -1)])

    async def insert(self, incident: Incident) -> str:
        """Insert and return the incident id.

        If another incident already holds the same external_key, return that
        incident's id instead.
        """
        doc = incident.model_dump(mode="json")
        doc["created_at"] = incident.created_at
        try:
            await self._col.insert_one(doc)
        except DuplicateKeyError:
            if incident.external_key is None:
                raise
            existing = await self.find_by_external_key(incident.external_key)
            if existing is None:
                raise
            return existing.id
        return incident.id

    async def find_by_external_key(self, external_key: str) -> Incident | None:
        doc = await self._col.find_one({"external_key": external_key}, {"_id": 0})
        return Incident(**doc) if doc else None

    async def get_by_id(self, incident_id: str) -> Incident | None:
        doc = await self._col.find_one({"id": incident_id}, {"_id": 0})
        return Incident(**doc) if doc else None

    async def list_incidents(self, skip: int = 0, limit: int = 50) -> list[Incident]:
        cursor = self._col.find({}, {"_id": 0}).sort("created_at", -1).skip(skip).limit(limit)
        return [Incident(**doc) async for doc in cursor]
