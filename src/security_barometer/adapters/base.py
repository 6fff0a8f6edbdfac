"""SourceAdapter — invoke a provider's backend function and normalize the reply.

Contract:
    request   POST <functions_base_url>/<function_name>  {"source": <provider_id>}
    success   2xx {"alerts": [...]}
    failure   {"error": "..."} or a non-2xx status

fetch() never raises. Failures are logged, reported to the Notifier, and
returned as FetchResult(ok=False) with an empty alert list, so callers that
only read `.alerts` still see "no alerts" while callers that care can tell
an outage apart from a quiet feed.
"""

from __future__ import annotations

import time
from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import ValidationError

from security_barometer.logger import get_logger
from security_barometer.model.alert import UniversalAlert
from security_barometer.normalization.providers import normalize_alert
from security_barometer.notify import Notifier

logger = get_logger(__name__)


class InvalidResponseError(ValueError):
    """The backend function replied with something other than {"alerts": [...]}."""


@dataclass
class FetchResult:
    provider: str
    ok: bool
    alerts: list[UniversalAlert] = field(default_factory=list)
    error: str | None = None
    http_status: int | None = None
    elapsed_ms: int = 0
    skipped: list[str] = field(default_factory=list)  # per-record normalization errors


class SourceAdapter(ABC):
    provider_id: str  # sent as {"source": ...}
    function_name: str
    display_name: str
    normalizer_key: str

    def __init__(
        self,
        client: httpx.AsyncClient,
        functions_base_url: str,
        notifier: Notifier,
        endpoint: str | None = None,
    ) -> None:
        self._client = client
        self._notifier = notifier
        self.endpoint = endpoint or f"{functions_base_url.rstrip('/')}/{self.function_name}"

    async def fetch(self) -> FetchResult:
        """Single attempt; no retry, no backoff."""
        started = time.perf_counter()
        status: int | None = None
        try:
            response = await self._client.post(self.endpoint, json={"source": self.provider_id})
            status = response.status_code
            payload = response.json()
            items = self._extract_items(payload, response)
        except (httpx.HTTPError, ValueError) as exc:
            elapsed = int((time.perf_counter() - started) * 1000)
            return self._failed(str(exc) or exc.__class__.__name__, status, elapsed)

        alerts, skipped = self._normalize(items)
        elapsed = int((time.perf_counter() - started) * 1000)
        logger.info(
            "alerts_fetched",
            provider=self.provider_id,
            count=len(alerts),
            skipped=len(skipped),
            elapsed_ms=elapsed,
        )
        return FetchResult(
            provider=self.provider_id,
            ok=True,
            alerts=alerts,
            http_status=status,
            elapsed_ms=elapsed,
            skipped=skipped,
        )

    def _extract_items(self, payload: Any, response: httpx.Response) -> list[dict[str, Any]]:
        if isinstance(payload, dict) and payload.get("error"):
            raise InvalidResponseError(str(payload["error"]))
        response.raise_for_status()
        if not isinstance(payload, dict) or not isinstance(payload.get("alerts"), list):
            raise InvalidResponseError("response has no 'alerts' list")
        return payload["alerts"]

    def _normalize(self, items: list[Any]) -> tuple[list[UniversalAlert], list[str]]:
        now = datetime.now(tz=timezone.utc)
        alerts: list[UniversalAlert] = []
        skipped: list[str] = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                skipped.append(f"record {index}: not an object")
                continue
            try:
                alerts.append(normalize_alert(item, self.normalizer_key, now))
            except ValidationError as exc:
                skipped.append(f"record {index}: {exc.error_count()} invalid field(s)")
                logger.warning("alert_skipped", provider=self.provider_id, index=index)
            except (TypeError, AttributeError) as exc:
                skipped.append(f"record {index}: {exc}")
                logger.warning("alert_skipped", provider=self.provider_id, index=index)
        return alerts, skipped

    def _failed(self, error: str, status: int | None, elapsed_ms: int) -> FetchResult:
        logger.error("alerts_fetch_failed", provider=self.provider_id, error=error, http_status=status)
        self._notifier.push(
            "Error",
            f"Failed to fetch {self.display_name} alerts. Please try again later.",
            variant="destructive",
        )
        return FetchResult(
            provider=self.provider_id,
            ok=False,
            error=error,
            http_status=status,
            elapsed_ms=elapsed_ms,
        )
