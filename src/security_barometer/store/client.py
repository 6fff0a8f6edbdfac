"""Mongo connection helpers shared by every store.

One AsyncIOMotorClient is opened in the app lifespan. It is tz-aware so
timestamps read back (last_poll_at, metric timestamps) compare cleanly
against datetime.now(tz=timezone.utc).
"""

from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from security_barometer.logger import get_logger

logger = get_logger(__name__)


def get_motor_client(uri: str) -> AsyncIOMotorClient:  # type: ignore[type-arg]
    return AsyncIOMotorClient(uri, tz_aware=True)


def get_database(
    client: AsyncIOMotorClient,  # type: ignore[type-arg]
    db_name: str,
) -> AsyncIOMotorDatabase:  # type: ignore[type-arg]
    return client[db_name]


async def ping(client: AsyncIOMotorClient) -> bool:  # type: ignore[type-arg]
    try:
        await client.admin.command("ping")
    except PyMongoError as exc:
        logger.warning("mongo_ping_failed", error=str(exc))
        return False
    return True
