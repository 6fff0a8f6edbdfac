"""Backend functions — POST /functions/{fetch-alerts,fetch-bc-alerts,fetch-everbridge-alerts}."""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from security_barometer.api.dependencies import get_config, get_http_client
from security_barometer.config import AppConfig
from security_barometer.functions import feeds
from security_barometer.functions.common import handle_function, preflight

router = APIRouter(prefix="/functions")


@router.options("/{function_name}")
async def function_preflight(function_name: str) -> Response:
    return preflight()


@router.post("/fetch-alerts")
async def fetch_alerts(
    request: Request,
    client: httpx.AsyncClient = Depends(get_http_client),
    config: AppConfig = Depends(get_config),
) -> JSONResponse:
    """Alert Ready feed, parsed from the NAAD Atom stream."""
    return await handle_function(
        request,
        "alert-ready",
        "Failed to fetch alerts",
        lambda: feeds.fetch_alert_ready_data(client, config.feeds.alert_ready_url),
    )


@router.post("/fetch-bc-alerts")
async def fetch_bc_alerts(
    request: Request,
    client: httpx.AsyncClient = Depends(get_http_client),
    config: AppConfig = Depends(get_config),
) -> JSONResponse:
    return await handle_function(
        request,
        "arcgis-bc",
        "Failed to fetch BC alerts",
        lambda: feeds.fetch_bc_alerts_data(client, config.feeds.bc_arcgis_url),
    )


async def _no_everbridge_alerts() -> list[dict]:  # type: ignore[type-arg]
    # Upstream Everbridge API is not integrated yet.
    return []


@router.post("/fetch-everbridge-alerts")
async def fetch_everbridge_alerts(request: Request) -> JSONResponse:
    return await handle_function(
        request,
        "everbridge",
        "Failed to fetch Everbridge alerts",
        _no_everbridge_alerts,
    )
