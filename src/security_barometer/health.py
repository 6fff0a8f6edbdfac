"""Source health — recent-window metrics, uptime and the poll schedule check."""

from __future__ import annotations

from datetime import datetime, timezone

from security_barometer.model.source import AlertSource, SourceHealthMetric

HEALTH_WINDOW = 10
MIN_POLLING_INTERVAL_SECONDS = 300


def get_source_health(
    metrics: list[SourceHealthMetric],
    source_id: str,
    limit: int = HEALTH_WINDOW,
) -> list[SourceHealthMetric]:
    """Return the first `limit` metrics for `source_id`.

    `metrics` is expected newest-first, as HealthMetricStore.recent() returns.
    """
    return [m for m in metrics if m.source_id == source_id][:limit]


def get_source_uptime(
    metrics: list[SourceHealthMetric],
    source_id: str,
    limit: int = HEALTH_WINDOW,
) -> float:
    """Percentage of successful polls in the recent window; 0 with no samples."""
    window = get_source_health(metrics, source_id, limit)
    if not window:
        return 0
    successes = sum(1 for m in window if m.success)
    return successes / len(window) * 100


def should_poll_source(
    source: AlertSource,
    now: datetime | None = None,
    min_interval: int = MIN_POLLING_INTERVAL_SECONDS,
) -> bool:
    """True if the source was never polled or its interval (floored at `min_interval`) elapsed."""
    if source.last_poll_at is None:
        return True
    now = now or datetime.now(tz=timezone.utc)
    last = source.last_poll_at
    if last.tzinfo is None:
        last = last.replace(tzinfo=timezone.utc)
    elapsed = (now - last).total_seconds()
    return elapsed >= max(source.polling_interval, min_interval)
