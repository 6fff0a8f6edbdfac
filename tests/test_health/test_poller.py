"""Unit tests for SourcePoller — stores mocked, HTTP via httpx.MockTransport."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from security_barometer.config import HealthConfig
from security_barometer.model.source import AlertSource
from security_barometer.notify import Notifier
from security_barometer.poller import SourcePoller
from security_barometer.store.metrics import HealthMetricStore
from security_barometer.store.sources import SourceStore

NOW = datetime(2024, 7, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def source_store() -> SourceStore:
    store = MagicMock(spec=SourceStore)
    store.record_poll = AsyncMock()
    store.list_sources = AsyncMock(return_value=[])
    return store  # type: ignore[return-value]


@pytest.fixture
def metric_store() -> HealthMetricStore:
    store = MagicMock(spec=HealthMetricStore)
    store.insert = AsyncMock(side_effect=lambda metric: metric.id)
    return store  # type: ignore[return-value]


def _poller(
    handler: Callable[[httpx.Request], httpx.Response],
    source_store: SourceStore,
    metric_store: HealthMetricStore,
    notifier: Notifier,
    health_config: HealthConfig,
) -> tuple[SourcePoller, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    poller = SourcePoller(
        source_store, metric_store, client, "http://functions.test", notifier, health_config
    )
    return poller, client


async def test_successful_poll_records_healthy_metric(
    make_source: Callable[..., AlertSource],
    source_store: SourceStore,
    metric_store: HealthMetricStore,
    notifier: Notifier,
    health_config: HealthConfig,
) -> None:
    payload = {"alerts": [{"id": "1", "title": "Road closed"}, {"id": "2", "title": "Smoke"}]}
    poller, client = _poller(
        lambda request: httpx.Response(200, json=payload),
        source_store,
        metric_store,
        notifier,
        health_config,
    )

    async with client:
        result = await poller.poll(make_source())

    assert result.ok is True
    metric = metric_store.insert.await_args.args[0]  # type: ignore[attr-defined]
    assert metric.source_id == "source-everbridge"
    assert metric.success is True
    assert metric.records_processed == 2
    assert metric.http_status_code == 200
    source_id, _, status = source_store.record_poll.await_args.args  # type: ignore[attr-defined]
    assert (source_id, status) == ("source-everbridge", "healthy")


async def test_failed_poll_records_error(
    make_source: Callable[..., AlertSource],
    source_store: SourceStore,
    metric_store: HealthMetricStore,
    notifier: Notifier,
    health_config: HealthConfig,
) -> None:
    poller, client = _poller(
        lambda request: httpx.Response(500, json={"error": "upstream down"}),
        source_store,
        metric_store,
        notifier,
        health_config,
    )

    async with client:
        result = await poller.poll(make_source())

    assert result.ok is False
    metric = metric_store.insert.await_args.args[0]  # type: ignore[attr-defined]
    assert metric.success is False
    assert metric.error_message == "upstream down"
    assert metric.http_status_code == 500
    assert source_store.record_poll.await_args.args[2] == "error"  # type: ignore[attr-defined]


async def test_unknown_source_type_is_recorded_as_failure(
    make_source: Callable[..., AlertSource],
    source_store: SourceStore,
    metric_store: HealthMetricStore,
    notifier: Notifier,
    health_config: HealthConfig,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    poller, client = _poller(handler, source_store, metric_store, notifier, health_config)

    async with client:
        result = await poller.poll(make_source(source_type="weather"))

    assert result.ok is False
    assert metric_store.insert.await_args.args[0].success is False  # type: ignore[attr-defined]


async def test_run_due_skips_recently_polled_sources(
    make_source: Callable[..., AlertSource],
    source_store: SourceStore,
    metric_store: HealthMetricStore,
    notifier: Notifier,
    health_config: HealthConfig,
) -> None:
    due = make_source(id="due", last_poll_at=NOW - timedelta(minutes=10))
    fresh = make_source(id="fresh", last_poll_at=NOW - timedelta(minutes=1))
    source_store.list_sources = AsyncMock(return_value=[due, fresh])  # type: ignore[method-assign]
    poller, client = _poller(
        lambda request: httpx.Response(200, json={"alerts": []}),
        source_store,
        metric_store,
        notifier,
        health_config,
    )

    async with client:
        outcomes = await poller.run_due(NOW)

    assert outcomes == {"due": True}
    source_store.list_sources.assert_awaited_once_with(active_only=True)  # type: ignore[attr-defined]
    assert metric_store.insert.await_count == 1  # type: ignore[attr-defined]


async def test_background_loop_survives_failing_cycle(
    source_store: SourceStore,
    metric_store: HealthMetricStore,
    notifier: Notifier,
) -> None:
    source_store.list_sources = AsyncMock(side_effect=TypeError("boom"))  # type: ignore[method-assign]
    config = HealthConfig(poll_check_seconds=0)
    poller = SourcePoller(
        source_store,
        metric_store,
        MagicMock(spec=httpx.AsyncClient),
        "http://functions.test",
        notifier,
        config,
    )

    await poller.start()
    for _ in range(20):
        await asyncio.sleep(0)

    assert source_store.list_sources.await_count > 1  # type: ignore[attr-defined]
    assert poller._task is not None and not poller._task.done()
    await poller.stop()
    assert poller._task.cancelled()
