"""Alert feed routes — GET /alerts, GET /alerts/status, POST /alerts/validate."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from pydantic import BaseModel

from security_barometer.aggregation import (
    AlertAggregator,
    ProviderOutcome,
    filter_alerts,
    validate_and_sort_alerts,
)
from security_barometer.api.dependencies import get_aggregator
from security_barometer.model.alert import UniversalAlert
from security_barometer.validation import BatchValidationReport, validate_alert_batch

router = APIRouter()


class AlertFeed(BaseModel):
    sequence: int
    alerts: list[UniversalAlert]
    outcomes: list[ProviderOutcome]


@router.get("/alerts", response_model=AlertFeed)
async def list_alerts(
    view: str = Query("all"),
    source: str | None = Query(None),
    provider: list[str] | None = Query(None),
    clean: bool = Query(False),
    aggregator: AlertAggregator = Depends(get_aggregator),
) -> AlertFeed:
    """Fetch from the enabled providers and apply the requested view.

    `clean=true` additionally drops placeholder/test alerts and sorts newest first.
    """
    result = await aggregator.fetch_all(provider)
    alerts = filter_alerts(result.alerts, view, source)
    if clean:
        alerts = validate_and_sort_alerts(alerts)
    return AlertFeed(sequence=result.sequence, alerts=alerts, outcomes=result.outcomes)


@router.get("/alerts/status", response_model=list[ProviderOutcome])
async def alert_status(
    aggregator: AlertAggregator = Depends(get_aggregator),
) -> list[ProviderOutcome]:
    latest = aggregator.latest
    return latest.outcomes if latest else []


@router.post("/alerts/validate", response_model=BatchValidationReport)
async def validate_alerts(
    records: list[dict[str, Any]] = Body(...),
) -> BatchValidationReport:
    return validate_alert_batch(records)
