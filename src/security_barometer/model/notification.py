"""Notification model — a user-facing message raised by a background operation."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


Variant = Literal["default", "destructive"]


class Notification(BaseModel):
    title: str
    description: str
    variant: Variant = "default"
    created_at: datetime = Field(default_factory=_utcnow)
