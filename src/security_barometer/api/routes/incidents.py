"""Incident query routes — GET /incidents, GET /incidents/{id}."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from security_barometer.api.dependencies import get_incident_store
from security_barometer.model.incident import Incident
from security_barometer.store.incidents import IncidentStore

router = APIRouter()


@router.get("/incidents", response_model=list[Incident])
async def list_incidents(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    incident_store: IncidentStore = Depends(get_incident_store),
) -> list[Incident]:
    return await incident_store.list_incidents(skip=skip, limit=limit)


@router.get("/incidents/{incident_id}", response_model=Incident)
async def get_incident(
    incident_id: str,
    incident_store: IncidentStore = Depends(get_incident_store),
) -> Incident:
    incident = await incident_store.get_by_id(incident_id)
    if incident is None:
        raise HTTPException(status_code=404, detail="Incident not found")
    return incident
