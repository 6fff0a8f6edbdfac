"""FastAPI dependency providers.

All shared resources (stores, adapters, integration state, config) are
attached to app.state at startup and retrieved here via Request injection.
"""

from __future__ import annotations

import httpx
from fastapi import Request

from security_barometer.aggregation import AlertAggregator
from security_barometer.config import AppConfig
from security_barometer.integration import AlertIntegrationService, IntegrationState
from security_barometer.notify import Notifier
from security_barometer.poller import SourcePoller
from security_barometer.store.incidents import IncidentStore
from security_barometer.store.metrics import HealthMetricStore
from security_barometer.store.preferences import PreferenceStore
from security_barometer.store.queue import QueueStore
from security_barometer.store.sources import SourceStore


def get_config(request: Request) -> AppConfig:
    return request.app.state.config  # type: ignore[no-any-return]


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client  # type: ignore[no-any-return]


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier  # type: ignore[no-any-return]


def get_aggregator(request: Request) -> AlertAggregator:
    return request.app.state.aggregator  # type: ignore[no-any-return]


def get_integration_state(request: Request) -> IntegrationState:
    return request.app.state.integration_state  # type: ignore[no-any-return]


def get_integration_service(request: Request) -> AlertIntegrationService:
    return request.app.state.integration_service  # type: ignore[no-any-return]


def get_incident_store(request: Request) -> IncidentStore:
    return request.app.state.incident_store  # type: ignore[no-any-return]


def get_source_store(request: Request) -> SourceStore:
    return request.app.state.source_store  # type: ignore[no-any-return]


def get_metric_store(request: Request) -> HealthMetricStore:
    return request.app.state.metric_store  # type: ignore[no-any-return]


def get_queue_store(request: Request) -> QueueStore:
    return request.app.state.queue_store  # type: ignore[no-any-return]


def get_preference_store(request: Request) -> PreferenceStore:
    return request.app.state.preference_store  # type: ignore[no-any-return]


def get_poller(request: Request) -> SourcePoller:
    return request.app.state.poller  # type: ignore[no-any-return]
