"""Shared pytest fixtures for the Security Barometer test suite."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from security_barometer.config import HealthConfig, IntegrationConfig
from security_barometer.model.alert import UniversalAlert
from security_barometer.model.source import AlertSource, SourceHealthMetric
from security_barometer.notify import Notifier
from security_barometer.store.incidents import IncidentStore


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def integration_config() -> IntegrationConfig:
    return IntegrationConfig(enabled=True, default_province_id="prov-on", confidence_score=0.7)


@pytest.fixture
def health_config() -> HealthConfig:
    return HealthConfig(window=10, min_polling_interval_seconds=300, poll_check_seconds=60)


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@pytest.fixture
def notifier() -> Notifier:
    return Notifier(max_retained=50)


@pytest.fixture
def mock_incident_store() -> IncidentStore:
    store = MagicMock(spec=IncidentStore)
    store.find_by_external_key = AsyncMock(return_value=None)
    store.insert = AsyncMock(side_effect=lambda incident: incident.id)
    return store  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Model factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_alert() -> Callable[..., UniversalAlert]:
    """Factory: create a UniversalAlert with sensible defaults, override via kwargs."""

    def _factory(**kwargs: Any) -> UniversalAlert:
        defaults: dict[str, Any] = {
            "id": "alert-1",
            "title": "Wildfire evacuation order",
            "description": "Residents must leave the area immediately.",
            "severity": "Severe",
            "urgency": "Immediate",
            "category": "Fire",
            "status": "Actual",
            "area": "Okanagan",
            "published": "2024-07-01T12:00:00.000Z",
            "source": "BC Emergency",
        }
        defaults.update(kwargs)
        return UniversalAlert(**defaults)

    return _factory


@pytest.fixture
def make_source() -> Callable[..., AlertSource]:
    def _factory(**kwargs: Any) -> AlertSource:
        defaults: dict[str, Any] = {
            "id": "source-everbridge",
            "name": "Everbridge",
            "source_type": "everbridge",
            "api_endpoint": "http://functions.test/fetch-everbridge-alerts",
            "polling_interval": 300,
        }
        defaults.update(kwargs)
        return AlertSource(**defaults)

    return _factory


@pytest.fixture
def make_metric() -> Callable[..., SourceHealthMetric]:
    def _factory(**kwargs: Any) -> SourceHealthMetric:
        defaults: dict[str, Any] = {
            "source_id": "source-everbridge",
            "timestamp": datetime(2024, 7, 1, 12, 0, 0, tzinfo=timezone.utc),
            "success": True,
            "records_processed": 3,
            "response_time_ms": 120,
            "http_status_code": 200,
        }
        defaults.update(kwargs)
        return SourceHealthMetric(**defaults)

    return _factory
