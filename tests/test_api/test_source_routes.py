"""Unit tests for source administration, queue and preference routes."""

from __future__ import annotations

import json
from typing import AsyncIterator, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from security_barometer.api.routes import preferences, queue, sources
from security_barometer.config import AppConfig
from security_barometer.model.source import AlertSource, QueueStatus, SourceHealthMetric
from security_barometer.poller import SourcePoller
from security_barometer.preferences import ACCORDION_KEY
from security_barometer.store.metrics import HealthMetricStore
from security_barometer.store.preferences import PreferenceStore
from security_barometer.store.queue import QueueStore
from security_barometer.store.sources import SourceStore


@pytest.fixture
def source_store() -> SourceStore:
    store = MagicMock(spec=SourceStore)
    store.insert = AsyncMock(side_effect=lambda source: source.id)
    store.get_by_id = AsyncMock(return_value=None)
    store.list_sources = AsyncMock(return_value=[])
    store.set_active = AsyncMock(return_value=False)
    return store  # type: ignore[return-value]


@pytest.fixture
def metric_store() -> HealthMetricStore:
    store = MagicMock(spec=HealthMetricStore)
    store.recent = AsyncMock(return_value=[])
    return store  # type: ignore[return-value]


@pytest.fixture
def preference_store() -> PreferenceStore:
    saved: dict[str, str] = {}
    store = MagicMock(spec=PreferenceStore)
    store.get = AsyncMock(side_effect=lambda key: saved.get(key))
    store.set = AsyncMock(side_effect=lambda key, value: saved.__setitem__(key, value))
    store.saved = saved
    return store  # type: ignore[return-value]


@pytest.fixture
def poller() -> SourcePoller:
    mock = MagicMock(spec=SourcePoller)
    mock.run_due = AsyncMock(return_value={"source-everbridge": True, "source-bc": False})
    return mock  # type: ignore[return-value]


@pytest.fixture
def queue_store() -> QueueStore:
    store = MagicMock(spec=QueueStore)
    store.enqueue = AsyncMock(side_effect=lambda item: item.id)
    store.status = AsyncMock(
        return_value=QueueStatus(pending=2, processing=1, completed=4, failed=1, total=8)
    )
    return store  # type: ignore[return-value]


@pytest.fixture
async def client(
    source_store: SourceStore,
    metric_store: HealthMetricStore,
    preference_store: PreferenceStore,
    poller: SourcePoller,
    queue_store: QueueStore,
) -> AsyncIterator[AsyncClient]:
    app = FastAPI()
    app.include_router(sources.router)
    app.include_router(queue.router)
    app.include_router(preferences.router)
    app.state.config = AppConfig()
    app.state.source_store = source_store
    app.state.metric_store = metric_store
    app.state.preference_store = preference_store
    app.state.poller = poller
    app.state.queue_store = queue_store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


async def test_create_source(client: AsyncClient, source_store: SourceStore) -> None:
    response = await client.post(
        "/sources",
        json={
            "name": "Everbridge",
            "source_type": "everbridge",
            "api_endpoint": "http://functions.test/fetch-everbridge-alerts",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["health_status"] == "unknown"
    assert body["polling_interval"] == 300
    assert body["is_active"] is True
    source_store.insert.assert_awaited_once()  # type: ignore[attr-defined]


async def test_unknown_source_is_404(client: AsyncClient) -> None:
    assert (await client.get("/sources/missing")).status_code == 404
    response = await client.patch("/sources/missing/active", json={"is_active": False})
    assert response.status_code == 404
    assert response.json()["detail"] == "Source not found"


async def test_deactivate_source(
    client: AsyncClient,
    source_store: SourceStore,
    make_source: Callable[..., AlertSource],
) -> None:
    source_store.set_active = AsyncMock(return_value=True)  # type: ignore[method-assign]
    source_store.get_by_id = AsyncMock(return_value=make_source())  # type: ignore[method-assign]

    response = await client.patch("/sources/source-everbridge/active", json={"is_active": False})

    assert response.json() == {"source_id": "source-everbridge", "is_active": False}
    source_store.set_active.assert_awaited_once_with("source-everbridge", False)  # type: ignore[attr-defined]
    assert (await client.get("/sources/source-everbridge")).json()["name"] == "Everbridge"


async def test_health_and_uptime(
    client: AsyncClient,
    metric_store: HealthMetricStore,
    make_metric: Callable[..., SourceHealthMetric],
) -> None:
    metrics = [make_metric(success=i % 4 != 0) for i in range(8)]
    metric_store.recent = AsyncMock(return_value=metrics)  # type: ignore[method-assign]

    health = await client.get("/sources/source-everbridge/health")
    uptime = await client.get("/sources/source-everbridge/uptime")

    assert len(health.json()) == 8
    assert uptime.json() == {"source_id": "source-everbridge", "uptime": 75.0, "samples": 8}
    metric_store.recent.assert_awaited_with("source-everbridge", limit=10)  # type: ignore[attr-defined]


async def test_uptime_without_samples(client: AsyncClient) -> None:
    response = await client.get("/sources/source-everbridge/uptime")
    assert response.json() == {"source_id": "source-everbridge", "uptime": 0.0, "samples": 0}


async def test_poll_due_sources(client: AsyncClient) -> None:
    response = await client.post("/sources/poll")
    assert response.json() == {
        "polled": 2,
        "results": {"source-everbridge": True, "source-bc": False},
    }


# ---------------------------------------------------------------------------
# Queue
# ---------------------------------------------------------------------------


async def test_queue_status(client: AsyncClient) -> None:
    response = await client.get("/queue/status")
    assert response.json() == {
        "pending": 2,
        "processing": 1,
        "completed": 4,
        "failed": 1,
        "total": 8,
    }


# ---------------------------------------------------------------------------
# Accordion preferences
# ---------------------------------------------------------------------------


async def test_accordion_defaults(client: AsyncClient) -> None:
    response = await client.get("/preferences/accordion")
    assert response.json()["active-alerts"] is True
    assert response.json()["incidents"] is False


async def test_accordion_toggle_persists(
    client: AsyncClient, preference_store: PreferenceStore
) -> None:
    response = await client.post("/preferences/accordion/incidents/toggle")

    assert response.json()["incidents"] is True
    saved = json.loads(preference_store.saved[ACCORDION_KEY])  # type: ignore[attr-defined]
    assert saved["incidents"] is True
    assert (await client.get("/preferences/accordion")).json()["incidents"] is True


async def test_accordion_put_merges_over_defaults(client: AsyncClient) -> None:
    response = await client.put("/preferences/accordion", json={"provinces": False})

    body = response.json()
    assert body["provinces"] is False
    assert body["international"] is True


async def test_enqueue_raw_payload(client: AsyncClient, queue_store: QueueStore) -> None:
    response = await client.post(
        "/queue", json={"source_id": "source-bc", "raw_payload": {"OBJECTID": 17}}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["processing_status"] == "pending"
    assert body["processing_attempts"] == 0
    item = queue_store.enqueue.await_args.args[0]  # type: ignore[attr-defined]
    assert item.raw_payload == {"OBJECTID": 17}
    assert item.id == body["id"]


async def test_accordion_expand_collapse_reset(client: AsyncClient) -> None:
    expanded = (await client.post("/preferences/accordion/expand-all")).json()
    assert all(expanded.values())

    collapsed = (await client.post("/preferences/accordion/collapse-all")).json()
    assert not any(collapsed.values())
    assert (await client.get("/preferences/accordion/open")).json() == []

    reset = (await client.post("/preferences/accordion/reset")).json()
    assert sorted(k for k, v in reset.items() if v) == ["active-alerts", "international", "provinces"]


async def test_accordion_open_sections(client: AsyncClient) -> None:
    response = await client.put("/preferences/accordion/open", json=["incidents"])

    assert [k for k, v in response.json().items() if v] == ["incidents"]
    assert (await client.get("/preferences/accordion/open")).json() == ["incidents"]
    assert (await client.get("/preferences/accordion/incidents")).json() == {
        "section_id": "incidents",
        "open": True,
    }
    assert (await client.get("/preferences/accordion/provinces")).json()["open"] is False
