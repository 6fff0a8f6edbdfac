"""Per-provider normalizers — map a raw provider record to a UniversalAlert.

Each provider names its fields differently; the normalizers below try the
provider's vocabulary in order and fall back to shared defaults. Raw records
without an id get a generated one prefixed with the provider.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Callable

from security_barometer.model.alert import UniversalAlert
from security_barometer.normalization.fields import (
    extract_coordinates,
    normalize_area,
    normalize_date,
    normalize_description,
    normalize_severity,
    normalize_status,
    normalize_title,
    normalize_urgency,
)

RawAlert = dict[str, Any]


def _generated_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _first(record: RawAlert, *keys: str) -> Any:
    """Return the first truthy value among `keys`, or None."""
    for key in keys:
        value = record.get(key)
        if value:
            return value
    return None


def _optional_date(value: Any, now: datetime | None) -> str | None:
    return normalize_date(value, now) if value else None


def normalize_alert_ready(raw: RawAlert, now: datetime | None = None) -> UniversalAlert:
    return UniversalAlert(
        id=str(raw.get("id") or _generated_id("alert-ready")),
        title=normalize_title(raw.get("title")),
        description=normalize_description(_first(raw, "summary", "description")),
        severity=normalize_severity(raw.get("severity")),
        urgency=normalize_urgency(raw.get("urgency")),
        category=raw.get("category") or "General",
        status=normalize_status(raw.get("status")),
        area=normalize_area(raw.get("area")),
        published=normalize_date(raw.get("published"), now),
        updated=_optional_date(raw.get("updated"), now),
        expires=_optional_date(raw.get("expiryTime"), now),
        effective=_optional_date(raw.get("effectiveTime"), now),
        url=raw.get("url"),
        instructions=raw.get("instructions"),
        author=raw.get("author"),
        source="Alert Ready",
        coordinates=extract_coordinates(raw),
    )


def normalize_bc_emergency(raw: RawAlert, now: datetime | None = None) -> UniversalAlert:
    # GeoJSON features carry their fields under "properties"
    props = raw.get("properties")
    if not isinstance(props, dict) or not props:
        props = raw
    return UniversalAlert(
        id=str(raw.get("id") or props.get("id") or _generated_id("bc-alert")),
        title=normalize_title(_first(props, "title", "headline", "name")),
        description=normalize_description(_first(props, "description", "summary", "details")),
        severity=normalize_severity(_first(props, "severity", "priority")),
        urgency=normalize_urgency(_first(props, "urgency", "immediacy")),
        category=_first(props, "category", "type") or "Emergency",
        status=normalize_status(props.get("status")),
        area=normalize_area(_first(props, "area", "location", "region")),
        published=normalize_date(_first(props, "published", "created", "date", "updated"), now),
        updated=_optional_date(props.get("updated"), now),
        expires=_optional_date(_first(props, "expires", "expiry"), now),
        effective=_optional_date(_first(props, "effective", "onset"), now),
        url=_first(props, "url", "link"),
        instructions=_first(props, "instructions", "action"),
        author=_first(props, "author", "source") or "BC Emergency Management",
        source="BC Emergency",
        coordinates=extract_coordinates(raw),
    )


def normalize_everbridge(raw: RawAlert, now: datetime | None = None) -> UniversalAlert:
    return UniversalAlert(
        id=str(raw.get("id") or _generated_id("everbridge")),
        title=normalize_title(_first(raw, "title", "subject")),
        description=normalize_description(_first(raw, "description", "message", "content")),
        severity=normalize_severity(_first(raw, "severity", "priority")),
        urgency=normalize_urgency(_first(raw, "urgency", "immediacy")),
        category=_first(raw, "category", "type") or "Notification",
        status=normalize_status(raw.get("status")),
        area=normalize_area(_first(raw, "location", "area", "region")),
        published=normalize_date(_first(raw, "updated", "created", "timestamp"), now),
        updated=_optional_date(raw.get("lastModified"), now),
        expires=_optional_date(raw.get("expires"), now),
        effective=_optional_date(raw.get("effective"), now),
        url=_first(raw, "url", "link"),
        instructions=_first(raw, "instructions", "actionRequired"),
        author=_first(raw, "author", "sender") or "Everbridge",
        source="Everbridge",
        coordinates=extract_coordinates(raw),
    )


def normalize_generic(raw: RawAlert, now: datetime | None = None) -> UniversalAlert:
    return UniversalAlert(
        id=str(raw.get("id") or _generated_id("generic")),
        title=normalize_title(_first(raw, "title", "name", "subject")),
        description=normalize_description(_first(raw, "description", "summary", "message")),
        severity=normalize_severity(raw.get("severity")),
        urgency=normalize_urgency(raw.get("urgency")),
        category=_first(raw, "category", "type") or "General",
        status=normalize_status(raw.get("status")),
        area=normalize_area(_first(raw, "area", "location")),
        published=normalize_date(_first(raw, "published", "created", "timestamp"), now),
        updated=_optional_date(raw.get("updated"), now),
        expires=_optional_date(raw.get("expires"), now),
        effective=_optional_date(raw.get("effective"), now),
        url=_first(raw, "url", "link"),
        instructions=raw.get("instructions"),
        author=_first(raw, "author", "source"),
        source="Other",
        coordinates=extract_coordinates(raw),
    )


_NORMALIZERS: dict[str, Callable[[RawAlert, datetime | None], UniversalAlert]] = {
    "alert-ready": normalize_alert_ready,
    "national": normalize_alert_ready,
    "bc": normalize_bc_emergency,
    "bc-emergency": normalize_bc_emergency,
    "arcgis-bc": normalize_bc_emergency,
    "everbridge": normalize_everbridge,
}


def normalize_alert(raw: RawAlert, provider: str, now: datetime | None = None) -> UniversalAlert:
    """Normalize one raw record from `provider`; unknown providers use the generic mapping."""
    normalizer = _NORMALIZERS.get(provider.lower(), normalize_generic)
    return normalizer(raw, now)
