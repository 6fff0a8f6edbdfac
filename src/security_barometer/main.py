"""FastAPI application factory with lifespan startup/shutdown."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI

from security_barometer.adapters.registry import ADAPTERS, build_adapter
from security_barometer.aggregation import AlertAggregator
from security_barometer.api.routes import (
    alerts,
    health,
    incidents,
    integration,
    notifications,
    preferences,
    queue,
    sources,
)
from security_barometer.config import load_config
from security_barometer.functions import routes as functions
from security_barometer.integration import AlertIntegrationService, IntegrationState
from security_barometer.logger import configure_logging, get_logger
from security_barometer.notify import Notifier
from security_barometer.poller import SourcePoller
from security_barometer.store.client import get_database, get_motor_client
from security_barometer.store.incidents import IncidentStore
from security_barometer.store.metrics import HealthMetricStore
from security_barometer.store.preferences import PreferenceStore
from security_barometer.store.queue import QueueStore
from security_barometer.store.sources import SourceStore

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create shared resources on startup; close them on shutdown."""
    configure_logging()
    config = load_config()

    client = get_motor_client(config.mongo_uri)
    db = get_database(client, config.mongo_db)

    incident_store = IncidentStore(db)
    source_store = SourceStore(db)
    metric_store = HealthMetricStore(db)
    queue_store = QueueStore(db)
    preference_store = PreferenceStore(db)

    # Ensure indexes exist (idempotent)
    await incident_store.ensure_indexes()
    await source_store.ensure_indexes()
    await metric_store.ensure_indexes()
    await queue_store.ensure_indexes()
    await preference_store.ensure_indexes()

    http_client = httpx.AsyncClient()
    notifier = Notifier(config.notifications.max_retained)

    adapters = {
        provider: build_adapter(provider, http_client, config.functions_base_url, notifier)
        for provider in ADAPTERS
        if config.provider_enabled(provider)
    }
    aggregator = AlertAggregator(adapters)

    poller = SourcePoller(
        source_store,
        metric_store,
        http_client,
        config.functions_base_url,
        notifier,
        config.health,
    )
    if config.health.background_polling:
        await poller.start()

    # Attach to app.state so dependency providers can access them
    app.state.config = config
    app.state.mongo_client = client
    app.state.http_client = http_client
    app.state.notifier = notifier
    app.state.aggregator = aggregator
    app.state.integration_state = IntegrationState(enabled=config.integration.enabled)
    app.state.integration_service = AlertIntegrationService(incident_store, config.integration)
    app.state.incident_store = incident_store
    app.state.source_store = source_store
    app.state.metric_store = metric_store
    app.state.queue_store = queue_store
    app.state.preference_store = preference_store
    app.state.poller = poller

    logger.info("startup_complete", providers=sorted(adapters))

    yield

    await poller.stop()
    await http_client.aclose()
    client.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Security Barometer",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(health.router)
    app.include_router(alerts.router)
    app.include_router(integration.router)
    app.include_router(incidents.router)
    app.include_router(sources.router)
    app.include_router(queue.router)
    app.include_router(preferences.router)
    app.include_router(notifications.router)
    app.include_router(functions.router)
    return app


app = create_app()
