"""Everbridge adapter.

The upstream Everbridge integration is not wired yet; the backend function
answers with an empty list, which this adapter reports as a successful fetch.
"""

from __future__ import annotations

from security_barometer.adapters.base import SourceAdapter


class EverbridgeAdapter(SourceAdapter):
    provider_id = "everbridge"
    function_name = "fetch-everbridge-alerts"
    display_name = "Everbridge"
    normalizer_key = "everbridge"
