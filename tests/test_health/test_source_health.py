"""Unit tests for source health helpers — pure functions, no store."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

from security_barometer.health import get_source_health, get_source_uptime, should_poll_source
from security_barometer.model.source import AlertSource, SourceHealthMetric

NOW = datetime(2024, 7, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_uptime_is_zero_without_samples() -> None:
    assert get_source_uptime([], "source-everbridge") == 0


def test_uptime_over_recent_window(make_metric: Callable[..., SourceHealthMetric]) -> None:
    metrics = [make_metric(success=i < 7) for i in range(10)]
    assert get_source_uptime(metrics, "source-everbridge") == 70


def test_window_is_capped_and_per_source(make_metric: Callable[..., SourceHealthMetric]) -> None:
    mine = [make_metric(timestamp=NOW - timedelta(minutes=i)) for i in range(12)]
    other = [make_metric(source_id="source-bc")]

    window = get_source_health(other + mine, "source-everbridge")

    assert len(window) == 10
    assert window == mine[:10]
    assert get_source_health(other + mine, "source-bc", limit=5) == other


def test_uptime_ignores_samples_outside_window(
    make_metric: Callable[..., SourceHealthMetric],
) -> None:
    metrics = [make_metric(success=True) for _ in range(10)] + [
        make_metric(success=False) for _ in range(5)
    ]
    assert get_source_uptime(metrics, "source-everbridge") == 100


def test_never_polled_source_is_due(make_source: Callable[..., AlertSource]) -> None:
    assert should_poll_source(make_source(last_poll_at=None), NOW) is True


def test_interval_elapsed(make_source: Callable[..., AlertSource]) -> None:
    source = make_source(polling_interval=600, last_poll_at=NOW - timedelta(seconds=599))
    assert should_poll_source(source, NOW) is False
    source = make_source(polling_interval=600, last_poll_at=NOW - timedelta(seconds=600))
    assert should_poll_source(source, NOW) is True


def test_interval_floored_at_five_minutes(make_source: Callable[..., AlertSource]) -> None:
    source = make_source(polling_interval=30, last_poll_at=NOW - timedelta(seconds=120))
    assert should_poll_source(source, NOW) is False
    assert should_poll_source(source, NOW, min_interval=60) is True


def test_naive_last_poll_treated_as_utc(make_source: Callable[..., AlertSource]) -> None:
    source = make_source(last_poll_at=(NOW - timedelta(seconds=400)).replace(tzinfo=None))
    assert should_poll_source(source, NOW) is True
