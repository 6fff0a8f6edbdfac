"""PyYAML loader → typed config dataclasses."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

ALERT_READY_URL = "https://rss.naad-adna.pelmorex.com/"
BC_ARCGIS_URL = (
    "https://services6.arcgis.com/ubm4tcTYICKBpist/arcgis/rest/services/"
    "British_Columbia_Active_Emergency_Alerts/FeatureServer/0/query"
    "?where=1%3D1&outFields=*&returnGeometry=false&f=json"
)


@dataclass
class ProviderConfig:
    enabled: bool = True


@dataclass
class IntegrationConfig:
    enabled: bool = True
    default_province_id: str = ""
    confidence_score: float = 0.7


@dataclass
class HealthConfig:
    window: int = 10
    min_polling_interval_seconds: int = 300
    poll_check_seconds: int = 60
    background_polling: bool = False


@dataclass
class FeedConfig:
    alert_ready_url: str = ALERT_READY_URL
    bc_arcgis_url: str = BC_ARCGIS_URL


@dataclass
class NotificationConfig:
    max_retained: int = 200


@dataclass
class AppConfig:
    functions_base_url: str = "http://localhost:8000/functions"
    providers: dict[str, ProviderConfig] = field(
        default_factory=lambda: {
            "alert-ready": ProviderConfig(),
            "bc-emergency": ProviderConfig(),
            "everbridge": ProviderConfig(),
        }
    )
    integration: IntegrationConfig = field(default_factory=IntegrationConfig)
    health: HealthConfig = field(default_factory=HealthConfig)
    feeds: FeedConfig = field(default_factory=FeedConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "security_barometer"

    def provider_enabled(self, provider_id: str) -> bool:
        provider = self.providers.get(provider_id)
        return provider.enabled if provider else False


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load settings.yaml and return a typed AppConfig.

    Falls back to defaults if the file is absent or a section is missing.
    Environment variables MONGO_URI, MONGO_DB and FUNCTIONS_BASE_URL override
    the defaults.
    """
    raw: dict = {}
    if path is None:
        path = Path(__file__).parent.parent.parent / "config" / "settings.yaml"

    resolved = Path(path)
    if resolved.exists():
        with resolved.open() as f:
            raw = yaml.safe_load(f) or {}

    functions_raw = raw.get("functions", {})
    providers_raw = raw.get("providers", {})
    integration_raw = raw.get("integration", {})
    health_raw = raw.get("health", {})
    feeds_raw = raw.get("feeds", {})
    notifications_raw = raw.get("notifications", {})

    providers = {
        provider_id: ProviderConfig(
            enabled=(providers_raw.get(provider_id) or {}).get("enabled", True),
        )
        for provider_id in ("alert-ready", "bc-emergency", "everbridge")
    }

    return AppConfig(
        functions_base_url=os.getenv(
            "FUNCTIONS_BASE_URL",
            functions_raw.get("base_url", "http://localhost:8000/functions"),
        ),
        providers=providers,
        integration=IntegrationConfig(
            enabled=integration_raw.get("enabled", True),
            default_province_id=integration_raw.get("default_province_id", ""),
            confidence_score=integration_raw.get("confidence_score", 0.7),
        ),
        health=HealthConfig(
            window=health_raw.get("window", 10),
            min_polling_interval_seconds=health_raw.get("min_polling_interval_seconds", 300),
            poll_check_seconds=health_raw.get("poll_check_seconds", 60),
            background_polling=health_raw.get("background_polling", False),
        ),
        feeds=FeedConfig(
            alert_ready_url=feeds_raw.get("alert_ready_url", ALERT_READY_URL),
            bc_arcgis_url=feeds_raw.get("bc_arcgis_url", BC_ARCGIS_URL),
        ),
        notifications=NotificationConfig(
            max_retained=notifications_raw.get("max_retained", 200),
        ),
        mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        mongo_db=os.getenv("MONGO_DB", "security_barometer"),
    )
