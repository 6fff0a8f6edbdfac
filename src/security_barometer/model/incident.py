"""Incident Pydantic model — the service's own record of a tracked security event."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class AlertLevel(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    SEVERE = "severe"


class IncidentSource(str, Enum):
    POLICE = "Police"
    GLOBAL_SECURITY = "Global Security"
    US_SOC = "US Security Operations Centre"
    GOVERNMENT = "Government"
    BC_ALERTS = "BC Alerts"
    EVERBRIDGE = "Everbridge"
    EMPLOYEE = "Employee Report"
    NEWS = "News Source"
    CROWDSOURCED = "Crowdsourced"
    MANUAL = "Manual"


class VerificationStatus(str, Enum):
    VERIFIED = "Verified"
    UNVERIFIED = "Unverified"


class Incident(BaseModel):
    """An internally tracked incident, possibly promoted from an external alert."""

    id: str = Field(default_factory=_new_id)
    title: str
    description: str
    province_id: str = ""
    timestamp: str  # ISO-8601, copied from the alert's published time
    alert_level: AlertLevel = AlertLevel.NORMAL
    source: IncidentSource = IncidentSource.MANUAL
    verification_status: VerificationStatus = VerificationStatus.UNVERIFIED
    recommended_action: str | None = None
    confidence_score: float | None = Field(default=None, ge=0.0, le=1.0)
    correlation_id: str | None = None
    raw_payload: dict[str, Any] = Field(default_factory=dict)
    geographic_scope: str | None = None
    severity_numeric: int = Field(default=1, ge=1, le=4)
    external_key: str | None = None  # "<alert source>:<alert id>" when promoted
    created_at: datetime = Field(default_factory=_utcnow)
