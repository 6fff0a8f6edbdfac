"""Provider id → adapter class lookup."""

from __future__ import annotations

import httpx

from security_barometer.adapters.alert_ready import AlertReadyAdapter
from security_barometer.adapters.base import SourceAdapter
from security_barometer.adapters.bc_emergency import BCEmergencyAdapter
from security_barometer.adapters.everbridge import EverbridgeAdapter
from security_barometer.notify import Notifier

# Keys match the provider sections in settings.yaml and AlertSource.source_type.
ADAPTERS: dict[str, type[SourceAdapter]] = {
    "alert-ready": AlertReadyAdapter,
    "bc-emergency": BCEmergencyAdapter,
    "everbridge": EverbridgeAdapter,
}


def build_adapter(
    provider: str,
    client: httpx.AsyncClient,
    functions_base_url: str,
    notifier: Notifier,
    endpoint: str | None = None,
) -> SourceAdapter:
    try:
        adapter_cls = ADAPTERS[provider]
    except KeyError:
        raise ValueError(f"Unknown alert provider: {provider}") from None
    return adapter_cls(client, functions_base_url, notifier, endpoint=endpoint)
