"""Alert → incident integration.

External alerts are promoted into incidents only while IntegrationState is
enabled. The state is an explicit object owned by the app and passed into
each call. Each promoted incident carries the alert's idempotency key
("<source>:<id>"), so promoting the same alert twice returns the existing
incident instead of creating a second one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from security_barometer.config import IntegrationConfig
from security_barometer.logger import get_logger
from security_barometer.model.alert import UniversalAlert
from security_barometer.model.incident import (
    AlertLevel,
    Incident,
    IncidentSource,
    VerificationStatus,
)
from security_barometer.normalization.fields import to_iso
from security_barometer.notify import Notifier
from security_barometer.store.incidents import IncidentStore

logger = get_logger(__name__)

SEVERITY_TO_ALERT_LEVEL: dict[str, AlertLevel] = {
    "extreme": AlertLevel.SEVERE,
    "severe": AlertLevel.SEVERE,
    "moderate": AlertLevel.WARNING,
    "minor": AlertLevel.NORMAL,
}

SOURCE_TO_INCIDENT_SOURCE: dict[str, IncidentSource] = {
    "Alert Ready": IncidentSource.GOVERNMENT,
    "BC Emergency": IncidentSource.BC_ALERTS,
    "Everbridge": IncidentSource.EVERBRIDGE,
}

SEVERITY_NUMERIC: dict[str, int] = {"extreme": 4, "severe": 3, "moderate": 2, "minor": 1}


@dataclass
class IntegrationState:
    enabled: bool = True


class AlertIntegrationService:
    def __init__(self, incident_store: IncidentStore, config: IntegrationConfig) -> None:
        self._store = incident_store
        self._config = config

    def map_alert_to_incident(self, alert: UniversalAlert) -> Incident:
        severity = alert.severity.lower()
        return Incident(
            title=alert.title,
            description=alert.description,
            province_id=self._config.default_province_id,
            timestamp=alert.published,
            alert_level=SEVERITY_TO_ALERT_LEVEL.get(severity, AlertLevel.NORMAL),
            source=SOURCE_TO_INCIDENT_SOURCE.get(alert.source, IncidentSource.MANUAL),
            verification_status=VerificationStatus.UNVERIFIED,
            confidence_score=self._config.confidence_score,
            raw_payload={
                "original_alert": alert.model_dump(
                    include={
                        "id",
                        "title",
                        "description",
                        "severity",
                        "urgency",
                        "area",
                        "published",
                        "source",
                    }
                ),
                "integration_source": "unified_feed",
                "processed_at": to_iso(datetime.now(tz=timezone.utc)),
            },
            geographic_scope=alert.area,
            severity_numeric=SEVERITY_NUMERIC.get(severity, 1),
            external_key=alert.external_key,
        )

    async def process_external_alert(self, alert: UniversalAlert) -> tuple[str, bool]:
        """Promote one alert. Returns (incident_id, created)."""
        existing = await self._store.find_by_external_key(alert.external_key)
        if existing is not None:
            logger.debug("duplicate_alert_skipped", external_key=alert.external_key)
            return existing.id, False

        incident = self.map_alert_to_incident(alert)
        incident_id = await self._store.insert(incident)
        created = incident_id == incident.id
        if created:
            logger.info("incident_created", incident_id=incident_id, external_key=alert.external_key)
        return incident_id, created

    async def batch_process_alerts(self, alerts: list[UniversalAlert]) -> list[str]:
        """Promote alerts in order; return ids of newly created incidents only."""
        created_ids: list[str] = []
        for alert in alerts:
            incident_id, created = await self.process_external_alert(alert)
            if created:
                created_ids.append(incident_id)
        return created_ids


async def process_alerts_to_incidents(
    alerts: list[UniversalAlert],
    state: IntegrationState,
    service: AlertIntegrationService,
    notifier: Notifier,
) -> list[str]:
    """Promote `alerts` when integration is enabled; never raises.

    Disabled integration returns [] without touching the store. Failures are
    logged and reported through `notifier`, and also return [].
    """
    if not state.enabled:
        return []

    try:
        created_ids = await service.batch_process_alerts(alerts)
    except Exception as exc:  # any store/mapping failure ends in a notification
        logger.exception("alert_integration_failed", alert_count=len(alerts), error=str(exc))
        notifier.push(
            "Integration Error",
            "Failed to process some external alerts",
            variant="destructive",
        )
        return []

    if created_ids:
        notifier.push(
            "Alerts Integrated",
            f"Successfully converted {len(created_ids)} external alerts to internal incidents",
        )
    return created_ids


def toggle_integration(state: IntegrationState, notifier: Notifier) -> bool:
    """Flip the integration flag and announce the new state. Returns the new value."""
    state.enabled = not state.enabled
    if state.enabled:
        notifier.push(
            "Integration Enabled",
            "External alerts will now create internal incidents",
        )
    else:
        notifier.push(
            "Integration Disabled",
            "External alerts will no longer create internal incidents",
        )
    logger.info("integration_toggled", enabled=state.enabled)
    return state.enabled
