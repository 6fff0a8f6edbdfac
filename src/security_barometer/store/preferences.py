"""PreferenceStore — key → JSON string, one document per key."""

from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorDatabase

COLLECTION = "preferences"


class PreferenceStore:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:  # type: ignore[type-arg]
        self._col = db[COLLECTION]

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("key", 1)], unique=True)

    async def get(self, key: str) -> str | None:
        doc = await self._col.find_one({"key": key}, {"_id": 0})
        return doc["value"] if doc else None

    async def set(self, key: str, value: str) -> None:
        await self._col.update_one({"key": key}, {"$set": {"value": value}}, upsert=True)
