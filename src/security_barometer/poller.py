"""SourcePoller — polls administrator-managed alert sources and records their health.

Each poll appends one SourceHealthMetric and updates the source's
last_poll_at / health_status. An optional background asyncio task runs
run_due() at a fixed interval; it is started and stopped from the FastAPI
lifespan.
"""

from __future__ import annotations

import asyncio
from contextlib import suppress
from datetime import datetime, timezone

import httpx
from pymongo.errors import PyMongoError

from security_barometer.adapters.base import FetchResult
from security_barometer.adapters.registry import build_adapter
from security_barometer.config import HealthConfig
from security_barometer.health import should_poll_source
from security_barometer.logger import get_logger
from security_barometer.model.source import AlertSource, SourceHealthMetric
from security_barometer.notify import Notifier
from security_barometer.store.metrics import HealthMetricStore
from security_barometer.store.sources import SourceStore

logger = get_logger(__name__)


class SourcePoller:
    def __init__(
        self,
        source_store: SourceStore,
        metric_store: HealthMetricStore,
        client: httpx.AsyncClient,
        functions_base_url: str,
        notifier: Notifier,
        config: HealthConfig,
    ) -> None:
        self._sources = source_store
        self._metrics = metric_store
        self._client = client
        self._functions_base_url = functions_base_url
        self._notifier = notifier
        self._config = config
        self._task: asyncio.Task | None = None

    async def poll(self, source: AlertSource) -> FetchResult:
        """Poll one source once and record the outcome."""
        try:
            adapter = build_adapter(
                source.source_type,
                self._client,
                self._functions_base_url,
                self._notifier,
                endpoint=source.api_endpoint or None,
            )
        except ValueError as exc:
            result = FetchResult(provider=source.source_type, ok=False, error=str(exc))
        else:
            result = await adapter.fetch()

        polled_at = datetime.now(tz=timezone.utc)
        await self._metrics.insert(
            SourceHealthMetric(
                source_id=source.id,
                timestamp=polled_at,
                response_time_ms=result.elapsed_ms,
                success=result.ok,
                error_message=result.error,
                records_processed=len(result.alerts),
                http_status_code=result.http_status,
            )
        )
        await self._sources.record_poll(
            source.id, polled_at, "healthy" if result.ok else "error"
        )
        logger.info("source_polled", source=source.name, ok=result.ok, records=len(result.alerts))
        return result

    async def run_due(self, now: datetime | None = None) -> dict[str, bool]:
        """Poll every active source whose interval has elapsed. Returns {source_id: ok}."""
        now = now or datetime.now(tz=timezone.utc)
        outcomes: dict[str, bool] = {}
        for source in await self._sources.list_sources(active_only=True):
            if not should_poll_source(source, now, self._config.min_polling_interval_seconds):
                continue
            result = await self.poll(source)
            outcomes[source.id] = result.ok
        return outcomes

    async def start(self) -> None:
        """Start the background poll task — call from FastAPI lifespan."""
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with suppress(asyncio.CancelledError):
                await self._task

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._config.poll_check_seconds)
            try:
                await self.run_due()
            except PyMongoError as exc:
                logger.error("poll_cycle_failed", error=str(exc))
            except Exception:  # the loop outlives any single bad cycle
                logger.exception("poll_cycle_crashed")
