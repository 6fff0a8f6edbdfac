"""Field-level normalizers shared by every provider.

Enumerated fields (severity, urgency, status) are mapped through synonym
tables; anything unrecognized becomes "Unknown" and is never passed through.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

from dateutil import parser as date_parser

from security_barometer.logger import get_logger
from security_barometer.model.alert import AlertStatus, Coordinates, Severity, Urgency

logger = get_logger(__name__)

_SEVERITY_SYNONYMS: dict[str, Severity] = {
    **dict.fromkeys(("extreme", "critical", "catastrophic"), "Extreme"),
    **dict.fromkeys(("severe", "major", "high"), "Severe"),
    **dict.fromkeys(("moderate", "medium", "warning"), "Moderate"),
    **dict.fromkeys(("minor", "low", "advisory"), "Minor"),
    **dict.fromkeys(("info", "information", "informational"), "Info"),
}

_URGENCY_SYNONYMS: dict[str, Urgency] = {
    **dict.fromkeys(("immediate", "now", "urgent"), "Immediate"),
    **dict.fromkeys(("expected", "soon", "likely"), "Expected"),
    **dict.fromkeys(("future", "later", "eventual"), "Future"),
    **dict.fromkeys(("past", "expired", "historical"), "Past"),
}

_STATUS_SYNONYMS: dict[str, AlertStatus] = {
    **dict.fromkeys(("actual", "real", "live"), "Actual"),
    **dict.fromkeys(("exercise", "drill", "training"), "Exercise"),
    **dict.fromkeys(("system", "technical", "maintenance"), "System"),
    **dict.fromkeys(("test", "testing"), "Test"),
    **dict.fromkeys(("draft", "preliminary"), "Draft"),
}

_TITLE_PREFIX = re.compile(r"^(Alert|Warning|Advisory|Notice):\s*", re.IGNORECASE)
_TITLE_SUFFIX = re.compile(r"\s*-\s*(Alert Ready|Emergency Alert|BC Emergency)$", re.IGNORECASE)
_TITLE_TAG = re.compile(r"^\[.*?\]\s*")

_HTML_TAG = re.compile(r"<[^>]*>")
_ISSUED_BY = re.compile(r"emergency\s+alert\s+issued\s+by", re.IGNORECASE)
_THIS_IS_A = re.compile(r"this\s+is\s+an?\s+", re.IGNORECASE)
_LEADING_ALERT = re.compile(r"^\s*alert:\s*", re.IGNORECASE)

_EMPTY_AREAS = {"Unknown", "N/A"}


def _lookup(value: Any, table: dict[str, str]) -> str:
    if not value or not isinstance(value, str):
        return "Unknown"
    return table.get(value.strip().lower(), "Unknown")


def normalize_severity(value: Any) -> Severity:
    return _lookup(value, _SEVERITY_SYNONYMS)  # type: ignore[return-value]


def normalize_urgency(value: Any) -> Urgency:
    return _lookup(value, _URGENCY_SYNONYMS)  # type: ignore[return-value]


def normalize_status(value: Any) -> AlertStatus:
    return _lookup(value, _STATUS_SYNONYMS)  # type: ignore[return-value]


def normalize_title(value: Any) -> str:
    if not value or not isinstance(value, str):
        return "Untitled Alert"
    cleaned = _TITLE_PREFIX.sub("", value)
    cleaned = _TITLE_SUFFIX.sub("", cleaned)
    cleaned = _TITLE_TAG.sub("", cleaned).strip()
    return cleaned[:1].upper() + cleaned[1:]


def normalize_description(value: Any) -> str:
    if not value or not isinstance(value, str):
        return "No description available"
    cleaned = _HTML_TAG.sub("", value)
    cleaned = _ISSUED_BY.sub("Issued by", cleaned, count=1)
    cleaned = _THIS_IS_A.sub("", cleaned, count=1)
    cleaned = _LEADING_ALERT.sub("", cleaned).strip()
    if cleaned and cleaned[-1] not in ".!?":
        cleaned += "."
    return cleaned


def normalize_area(value: Any) -> str:
    if not isinstance(value, str) or not value or value in _EMPTY_AREAS:
        return "Area not specified"
    return " ".join(value.split())


def to_iso(moment: datetime) -> str:
    """Render a datetime as a UTC ISO-8601 string with millisecond precision."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_date(value: Any, now: datetime | None = None) -> str:
    """Parse a provider timestamp into ISO-8601 UTC.

    Missing or unparseable values fall back to `now` (default: current time).
    """
    fallback = now or datetime.now(tz=timezone.utc)
    if not value:
        return to_iso(fallback)
    if isinstance(value, datetime):
        return to_iso(value)
    try:
        return to_iso(date_parser.parse(str(value)))
    except (ValueError, OverflowError) as exc:
        logger.warning("invalid_date", value=value, error=str(exc))
        return to_iso(fallback)


def _coordinates(latitude: Any, longitude: Any) -> Coordinates | None:
    try:
        lat, lon = float(latitude), float(longitude)
    except (TypeError, ValueError):
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return Coordinates(latitude=lat, longitude=lon)


def extract_coordinates(record: dict[str, Any]) -> Coordinates | None:
    """Pull coordinates from GeoJSON geometry, latitude/longitude or lat/lng."""
    geometry = record.get("geometry")
    if isinstance(geometry, dict):
        coords = geometry.get("coordinates")
        if isinstance(coords, (list, tuple)) and len(coords) >= 2:
            # GeoJSON order is [longitude, latitude]
            return _coordinates(coords[1], coords[0])

    if record.get("latitude") and record.get("longitude"):
        return _coordinates(record["latitude"], record["longitude"])

    if record.get("lat") and record.get("lng"):
        return _coordinates(record["lat"], record["lng"])

    return None
