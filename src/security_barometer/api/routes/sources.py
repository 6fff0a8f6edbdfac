"""Alert source administration and health routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from security_barometer.api.dependencies import (
    get_config,
    get_metric_store,
    get_poller,
    get_source_store,
)
from security_barometer.config import AppConfig
from security_barometer.health import get_source_health, get_source_uptime
from security_barometer.model.source import AlertSource, AlertSourceCreate, SourceHealthMetric
from security_barometer.poller import SourcePoller
from security_barometer.store.metrics import HealthMetricStore
from security_barometer.store.sources import SourceStore

router = APIRouter()


class ActiveUpdate(BaseModel):
    is_active: bool


class SourceUptime(BaseModel):
    source_id: str
    uptime: float
    samples: int


async def _require_source(source_id: str, source_store: SourceStore) -> AlertSource:
    source = await source_store.get_by_id(source_id)
    if source is None:
        raise HTTPException(status_code=404, detail="Source not found")
    return source


@router.get("/sources", response_model=list[AlertSource])
async def list_sources(
    source_store: SourceStore = Depends(get_source_store),
) -> list[AlertSource]:
    return await source_store.list_sources()


@router.post("/sources", response_model=AlertSource, status_code=201)
async def create_source(
    payload: AlertSourceCreate,
    source_store: SourceStore = Depends(get_source_store),
) -> AlertSource:
    source = AlertSource(**payload.model_dump())
    await source_store.insert(source)
    return source


@router.get("/sources/{source_id}", response_model=AlertSource)
async def get_source(
    source_id: str,
    source_store: SourceStore = Depends(get_source_store),
) -> AlertSource:
    return await _require_source(source_id, source_store)


@router.patch("/sources/{source_id}/active", response_model=dict)
async def set_source_active(
    source_id: str,
    update: ActiveUpdate,
    source_store: SourceStore = Depends(get_source_store),
) -> dict:  # type: ignore[type-arg]
    updated = await source_store.set_active(source_id, update.is_active)
    if not updated:
        raise HTTPException(status_code=404, detail="Source not found")
    return {"source_id": source_id, "is_active": update.is_active}


@router.get("/sources/{source_id}/health", response_model=list[SourceHealthMetric])
async def source_health(
    source_id: str,
    metric_store: HealthMetricStore = Depends(get_metric_store),
    config: AppConfig = Depends(get_config),
) -> list[SourceHealthMetric]:
    metrics = await metric_store.recent(source_id, limit=config.health.window)
    return get_source_health(metrics, source_id, config.health.window)


@router.get("/sources/{source_id}/uptime", response_model=SourceUptime)
async def source_uptime(
    source_id: str,
    metric_store: HealthMetricStore = Depends(get_metric_store),
    config: AppConfig = Depends(get_config),
) -> SourceUptime:
    metrics = await metric_store.recent(source_id, limit=config.health.window)
    window = get_source_health(metrics, source_id, config.health.window)
    return SourceUptime(
        source_id=source_id,
        uptime=get_source_uptime(metrics, source_id, config.health.window),
        samples=len(window),
    )


@router.post("/sources/poll", response_model=dict)
async def poll_due_sources(
    poller: SourcePoller = Depends(get_poller),
) -> dict:  # type: ignore[type-arg]
    """Poll every active source that is due now."""
    outcomes = await poller.run_due()
    return {"polled": len(outcomes), "results": outcomes}
