"""Alert Ready (national public alerting) adapter."""

from __future__ import annotations

from security_barometer.adapters.base import SourceAdapter


class AlertReadyAdapter(SourceAdapter):
    provider_id = "alert-ready"
    function_name = "fetch-alerts"
    display_name = "Alert Ready"
    normalizer_key = "alert-ready"
