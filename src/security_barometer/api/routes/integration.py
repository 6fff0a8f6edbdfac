"""Integration routes — GET /integration, POST /integration/toggle, POST /integration/process."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from security_barometer.api.dependencies import (
    get_integration_service,
    get_integration_state,
    get_notifier,
)
from security_barometer.integration import (
    AlertIntegrationService,
    IntegrationState,
    process_alerts_to_incidents,
    toggle_integration,
)
from security_barometer.model.alert import UniversalAlert
from security_barometer.notify import Notifier

router = APIRouter()


class IntegrationStatus(BaseModel):
    enabled: bool


class ProcessResponse(BaseModel):
    enabled: bool
    incident_ids: list[str]


@router.get("/integration", response_model=IntegrationStatus)
async def integration_status(
    state: IntegrationState = Depends(get_integration_state),
) -> IntegrationStatus:
    return IntegrationStatus(enabled=state.enabled)


@router.post("/integration/toggle", response_model=IntegrationStatus)
async def toggle(
    state: IntegrationState = Depends(get_integration_state),
    notifier: Notifier = Depends(get_notifier),
) -> IntegrationStatus:
    return IntegrationStatus(enabled=toggle_integration(state, notifier))


@router.post("/integration/process", response_model=ProcessResponse)
async def process(
    alerts: list[UniversalAlert],
    state: IntegrationState = Depends(get_integration_state),
    service: AlertIntegrationService = Depends(get_integration_service),
    notifier: Notifier = Depends(get_notifier),
) -> ProcessResponse:
    """Promote posted alerts into incidents; ids of newly created incidents only."""
    incident_ids = await process_alerts_to_incidents(alerts, state, service, notifier)
    return ProcessResponse(enabled=state.enabled, incident_ids=incident_ids)
