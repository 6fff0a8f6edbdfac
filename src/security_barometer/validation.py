"""Conformance checks for records claiming to be UniversalAlerts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from dateutil import parser as date_parser
from pydantic import BaseModel

from security_barometer.model.alert import SEVERITIES, SOURCE_NAMES, STATUSES, URGENCIES

_REQUIRED = (
    "id",
    "title",
    "description",
    "severity",
    "urgency",
    "category",
    "status",
    "area",
    "published",
    "source",
)
_DATE_FIELDS = ("published", "updated", "expires", "effective")


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class BatchValidationReport(BaseModel):
    total_alerts: int
    valid_alerts: int
    invalid_alerts: int
    errors: list[str]
    warnings: list[str]


def _parses(value: Any) -> bool:
    try:
        date_parser.parse(str(value))
    except (ValueError, OverflowError):
        return False
    return True


def _in_range(value: Any, low: float, high: float) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and low <= value <= high


def validate_universal_alert(record: dict[str, Any]) -> ValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    for name in _REQUIRED:
        if not record.get(name):
            errors.append(f"Missing required field: {name}")

    for name, allowed in (
        ("severity", SEVERITIES),
        ("urgency", URGENCIES),
        ("status", STATUSES),
        ("source", SOURCE_NAMES),
    ):
        value = record.get(name)
        if value and value not in allowed:
            errors.append(f"Invalid {name}: {value}. Must be one of: {', '.join(allowed)}")

    for name in _DATE_FIELDS:
        value = record.get(name)
        if value and not _parses(value):
            errors.append(f"Invalid {name} date format")

    coordinates = record.get("coordinates")
    if coordinates:
        if not isinstance(coordinates, dict):
            coordinates = {}
        if not _in_range(coordinates.get("latitude"), -90, 90):
            errors.append("Invalid latitude coordinate")
        if not _in_range(coordinates.get("longitude"), -180, 180):
            errors.append("Invalid longitude coordinate")

    if not record.get("instructions") and record.get("severity") in ("Extreme", "Severe"):
        warnings.append("High severity alert missing instructions")
    if not record.get("url"):
        warnings.append("Alert missing URL for additional details")
    if not record.get("author"):
        warnings.append("Alert missing author information")

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def validate_alert_batch(records: list[dict[str, Any]]) -> BatchValidationReport:
    errors: list[str] = []
    warnings: list[str] = []
    valid = 0

    for index, record in enumerate(records, start=1):
        result = validate_universal_alert(record)
        if result.is_valid:
            valid += 1
        else:
            errors.extend(f"Alert {index}: {error}" for error in result.errors)
        warnings.extend(f"Alert {index}: {warning}" for warning in result.warnings)

    return BatchValidationReport(
        total_alerts=len(records),
        valid_alerts=valid,
        invalid_alerts=len(records) - valid,
        errors=errors,
        warnings=warnings,
    )
