"""Aggregation layer — merge enabled adapters, filter for dashboard views.

filter_alerts() and validate_and_sort_alerts() are pure functions over an
in-memory list. AlertAggregator runs the adapters concurrently and keeps the
latest snapshot; every run takes a sequence number when it starts, and a run
that finishes after a newer one has already been committed is discarded
rather than overwriting the newer snapshot.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from dateutil import parser as date_parser
from pydantic import BaseModel

from security_barometer.adapters.base import FetchResult, SourceAdapter
from security_barometer.logger import get_logger
from security_barometer.model.alert import UniversalAlert

logger = get_logger(__name__)

VIEWS = ("all", "severe", "immediate")
_SEVERE = {"Extreme", "Severe"}
_TEST_WORD = re.compile(r"\btest", re.IGNORECASE)
_DUMMY_WORD = re.compile(r"\bdummy", re.IGNORECASE)


def filter_alerts(
    alerts: list[UniversalAlert],
    view: str,
    source_filter: str | None = None,
) -> list[UniversalAlert]:
    """Apply a dashboard view. Unknown views return the input unchanged."""
    filtered = alerts
    if source_filter and source_filter != "all":
        needle = source_filter.lower()
        filtered = [a for a in filtered if needle in a.source.lower()]

    if view == "severe":
        return [a for a in filtered if a.severity in _SEVERE]
    if view == "immediate":
        return [a for a in filtered if a.urgency == "Immediate"]
    return filtered


def _is_placeholder(alert: UniversalAlert) -> bool:
    title = alert.title.strip()
    description = alert.description.strip()
    if not title or title == "Untitled Alert":
        return True
    if not description or description == "No description available":
        return True
    return bool(
        _TEST_WORD.search(title) or _TEST_WORD.search(description) or _DUMMY_WORD.search(title)
    )


def _published_at(alert: UniversalAlert) -> datetime:
    try:
        moment = date_parser.parse(alert.published)
    except (ValueError, OverflowError):
        return datetime.min.replace(tzinfo=timezone.utc)
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


def validate_and_sort_alerts(alerts: list[UniversalAlert]) -> list[UniversalAlert]:
    """Drop placeholder/test alerts and sort newest-published first."""
    kept = [a for a in alerts if not _is_placeholder(a)]
    return sorted(kept, key=_published_at, reverse=True)


class ProviderOutcome(BaseModel):
    provider: str
    ok: bool
    count: int
    error: str | None = None


@dataclass
class AggregateResult:
    sequence: int
    alerts: list[UniversalAlert] = field(default_factory=list)
    outcomes: list[ProviderOutcome] = field(default_factory=list)

    @property
    def failed(self) -> list[str]:
        return [o.provider for o in self.outcomes if not o.ok]


def merge_results(results: Iterable[FetchResult]) -> list[UniversalAlert]:
    """Concatenate adapter results, keeping the first alert per (source, id)."""
    seen: set[tuple[str, str]] = set()
    merged: list[UniversalAlert] = []
    for result in results:
        for alert in result.alerts:
            key = (alert.source, alert.id)
            if key in seen:
                continue
            seen.add(key)
            merged.append(alert)
    return merged


class AlertAggregator:
    def __init__(self, adapters: dict[str, SourceAdapter]) -> None:
        self._adapters = adapters
        self._issued = 0
        self._committed = 0
        self._latest: AggregateResult | None = None

    @property
    def providers(self) -> list[str]:
        return list(self._adapters)

    @property
    def latest(self) -> AggregateResult | None:
        return self._latest

    async def fetch_all(self, providers: Iterable[str] | None = None) -> AggregateResult:
        """Fetch from every selected adapter concurrently and merge the results."""
        self._issued += 1
        sequence = self._issued

        selected = list(providers) if providers is not None else list(self._adapters)
        adapters = [self._adapters[p] for p in selected if p in self._adapters]
        results = await asyncio.gather(*(adapter.fetch() for adapter in adapters))

        aggregate = AggregateResult(
            sequence=sequence,
            alerts=merge_results(results),
            outcomes=[
                ProviderOutcome(
                    provider=r.provider, ok=r.ok, count=len(r.alerts), error=r.error
                )
                for r in results
            ],
        )
        self._commit(aggregate)
        return aggregate

    def _commit(self, aggregate: AggregateResult) -> bool:
        if aggregate.sequence < self._committed:
            logger.info(
                "stale_aggregate_discarded",
                sequence=aggregate.sequence,
                committed=self._committed,
            )
            return False
        self._committed = aggregate.sequence
        self._latest = aggregate
        return True
