"""BC Emergency adapter — backed by the BC ArcGIS active-alerts layer."""

from __future__ import annotations

from security_barometer.adapters.base import SourceAdapter


class BCEmergencyAdapter(SourceAdapter):
    provider_id = "arcgis-bc"
    function_name = "fetch-bc-alerts"
    display_name = "BC Emergency"
    normalizer_key = "bc-emergency"
