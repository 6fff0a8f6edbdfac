"""Ingestion queue tally.

QueueStatus is derived: it is recomputed from the items' processing status
each time and never stored. Nothing in this service moves an item between
states.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Mapping

from security_barometer.model.source import QueueStatus


def queue_status_from_counts(counts: Mapping[str | None, int]) -> QueueStatus:
    """Build a QueueStatus from per-status counts; unrecognized keys count only toward total."""
    return QueueStatus(
        pending=counts.get("pending", 0),
        processing=counts.get("processing", 0),
        completed=counts.get("completed", 0),
        failed=counts.get("failed", 0),
        total=sum(counts.values()),
    )


def compute_queue_status(statuses: Iterable[str | None]) -> QueueStatus:
    """Tally processing statuses one item at a time."""
    return queue_status_from_counts(Counter(statuses))
