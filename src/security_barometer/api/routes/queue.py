"""Ingestion queue routes — POST /queue, GET /queue/status."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from security_barometer.api.dependencies import get_queue_store
from security_barometer.model.source import QueueItem, QueueStatus
from security_barometer.store.queue import QueueStore

router = APIRouter()


class QueueSubmission(BaseModel):
    source_id: str | None = None
    raw_payload: dict[str, Any]


@router.post("/queue", response_model=QueueItem, status_code=201)
async def enqueue(
    submission: QueueSubmission,
    queue_store: QueueStore = Depends(get_queue_store),
) -> QueueItem:
    """Queue a raw provider payload for ingestion; it starts as "pending"."""
    item = QueueItem(source_id=submission.source_id, raw_payload=submission.raw_payload)
    await queue_store.enqueue(item)
    return item


@router.get("/queue/status", response_model=QueueStatus)
async def queue_status(
    queue_store: QueueStore = Depends(get_queue_store),
) -> QueueStatus:
    return await queue_store.status()
