"""AlertSource, SourceHealthMetric and ingestion queue models."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


HealthStatus = Literal["healthy", "degraded", "error", "unknown"]
ProcessingStatus = Literal["pending", "processing", "completed", "failed"]


class AlertSource(BaseModel):
    """A polled external source, managed by an administrator."""

    id: str = Field(default_factory=_new_id)
    name: str
    source_type: str  # provider id, e.g. "everbridge"
    api_endpoint: str
    description: str | None = None
    is_active: bool = True
    polling_interval: int = Field(default=300, ge=1)  # seconds
    last_poll_at: datetime | None = None
    health_status: HealthStatus = "unknown"
    configuration: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class AlertSourceCreate(BaseModel):
    """Administrator-supplied fields for a new source."""

    name: str
    source_type: str
    api_endpoint: str
    description: str | None = None
    is_active: bool = True
    polling_interval: int = Field(default=300, ge=1)
    configuration: dict[str, Any] = Field(default_factory=dict)


class SourceHealthMetric(BaseModel):
    """Outcome of a single poll attempt. Never updated after insert."""

    id: str = Field(default_factory=_new_id)
    source_id: str
    timestamp: datetime = Field(default_factory=_utcnow)
    response_time_ms: int | None = None
    success: bool
    error_message: str | None = None
    records_processed: int = 0
    http_status_code: int | None = None


class QueueItem(BaseModel):
    id: str = Field(default_factory=_new_id)
    source_id: str | None = None
    raw_payload: dict[str, Any]
    processing_status: ProcessingStatus = "pending"
    processing_attempts: int = 0
    error_message: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    processed_at: datetime | None = None


class QueueStatus(BaseModel):
    pending: int = 0
    processing: int = 0
    completed: int = 0
    failed: int = 0
    total: int = 0
