"""UniversalAlert — the provider-agnostic alert every adapter normalizes into."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Severity = Literal["Extreme", "Severe", "Moderate", "Minor", "Info", "Unknown"]
Urgency = Literal["Immediate", "Expected", "Future", "Past", "Unknown"]
AlertStatus = Literal["Actual", "Exercise", "System", "Test", "Draft", "Unknown"]
AlertSourceName = Literal["Alert Ready", "BC Emergency", "Everbridge", "Other"]

SEVERITIES: tuple[str, ...] = ("Extreme", "Severe", "Moderate", "Minor", "Info", "Unknown")
URGENCIES: tuple[str, ...] = ("Immediate", "Expected", "Future", "Past", "Unknown")
STATUSES: tuple[str, ...] = ("Actual", "Exercise", "System", "Test", "Draft", "Unknown")
SOURCE_NAMES: tuple[str, ...] = ("Alert Ready", "BC Emergency", "Everbridge", "Other")


class Coordinates(BaseModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class UniversalAlert(BaseModel):
    """A normalized external alert. Timestamps are ISO-8601 strings."""

    id: str
    title: str
    description: str
    severity: Severity = "Unknown"
    urgency: Urgency = "Unknown"
    category: str = "General"
    status: AlertStatus = "Unknown"
    area: str
    published: str
    updated: str | None = None
    expires: str | None = None
    effective: str | None = None
    url: str | None = None
    instructions: str | None = None
    author: str | None = None
    source: AlertSourceName
    coordinates: Coordinates | None = None

    @property
    def external_key(self) -> str:
        """Idempotency key used when promoting the alert into an incident."""
        return f"{self.source}:{self.id}"
