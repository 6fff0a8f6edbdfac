"""GET /health — liveness plus Mongo reachability and enabled providers."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from security_barometer.aggregation import AlertAggregator
from security_barometer.api.dependencies import get_aggregator
from security_barometer.store.client import ping

router = APIRouter()


@router.get("/health")
async def health(
    request: Request,
    aggregator: AlertAggregator = Depends(get_aggregator),
) -> dict:  # type: ignore[type-arg]
    connected = await ping(request.app.state.mongo_client)
    return {
        "status": "ok",
        "db": "connected" if connected else "unavailable",
        "providers": aggregator.providers,
    }
