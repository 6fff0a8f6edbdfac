"""Upstream feed readers used by the backend functions.

    Alert Ready   NAAD Atom feed; CAP parameters are embedded in each entry's
                  content as "severity: Extreme" style lines.
    BC Emergency  ArcGIS FeatureServer query; one feature per active alert.

Each reader returns provider-shaped dicts that the adapters later normalize.
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone
from typing import Any

import feedparser
import httpx

from security_barometer.logger import get_logger
from security_barometer.normalization.fields import to_iso

logger = get_logger(__name__)

_CAP_PATTERNS = {
    "severity": re.compile(r"severity:\s*([A-Za-z]+)", re.IGNORECASE),
    "urgency": re.compile(r"urgency:\s*([A-Za-z]+)", re.IGNORECASE),
    "category": re.compile(r"category:\s*([A-Za-z]+)", re.IGNORECASE),
    "status": re.compile(r"status:\s*([A-Za-z]+)", re.IGNORECASE),
    "area": re.compile(r"areaDesc:\s*([^\n]+)", re.IGNORECASE),
}
_CAP_DEFAULTS = {
    "severity": "Unknown",
    "urgency": "Unknown",
    "category": "Other",
    "status": "Actual",
    "area": "Unknown",
}


def extract_cap_parameters(content: str | None) -> dict[str, str]:
    params = dict(_CAP_DEFAULTS)
    if not content:
        return params
    for name, pattern in _CAP_PATTERNS.items():
        match = pattern.search(content)
        if match:
            params[name] = match.group(1).strip()
    return params


def parse_alert_ready_feed(xml_text: str) -> list[dict[str, Any]]:
    feed = feedparser.parse(xml_text)
    if feed.bozo and not feed.entries:
        raise ValueError(f"Unparseable Alert Ready feed: {feed.get('bozo_exception')}")

    alerts: list[dict[str, Any]] = []
    for entry in feed.entries:
        content = entry.content[0].value if entry.get("content") else None
        alerts.append(
            {
                "id": entry.get("id") or f"alert-{uuid.uuid4().hex[:12]}",
                "title": entry.get("title"),
                "published": entry.get("published"),
                "updated": entry.get("updated"),
                "summary": entry.get("summary"),
                "url": entry.get("link"),
                **extract_cap_parameters(content),
            }
        )
    return alerts


def _epoch_ms_to_iso(value: Any) -> str:
    if value is None:
        return to_iso(datetime.now(tz=timezone.utc))
    return to_iso(datetime.fromtimestamp(float(value) / 1000, tz=timezone.utc))


def parse_bc_features(data: dict[str, Any]) -> list[dict[str, Any]]:
    features = data.get("features")
    if not isinstance(features, list):
        logger.info("bc_feed_no_features")
        return []

    alerts: list[dict[str, Any]] = []
    for feature in features:
        attributes = feature.get("attributes") or {}
        object_id = attributes.get("OBJECTID")
        alerts.append(
            {
                "id": str(object_id) if object_id is not None else f"bc-alert-{uuid.uuid4().hex[:12]}",
                "title": attributes.get("event_name") or "Emergency Alert",
                "type": attributes.get("event_type") or "Alert",
                "status": attributes.get("status") or "Active",
                "severity": attributes.get("severity") or "Unknown",
                "location": attributes.get("area_desc") or "British Columbia",
                "description": attributes.get("description") or "No additional details available",
                "updated": _epoch_ms_to_iso(attributes.get("last_updated")),
                "url": attributes.get("info_url"),
            }
        )
    return alerts


async def fetch_alert_ready_data(client: httpx.AsyncClient, url: str) -> list[dict[str, Any]]:
    response = await client.get(url)
    response.raise_for_status()
    alerts = parse_alert_ready_feed(response.text)
    logger.info("alert_ready_feed_parsed", count=len(alerts))
    return alerts


async def fetch_bc_alerts_data(client: httpx.AsyncClient, url: str) -> list[dict[str, Any]]:
    response = await client.get(url)
    response.raise_for_status()
    alerts = parse_bc_features(response.json())
    logger.info("bc_feed_parsed", count=len(alerts))
    return alerts
