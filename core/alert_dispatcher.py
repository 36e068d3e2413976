import logging
from typing import List, Tuple

from .config import (
    NOTIFICATION_MAP,
    SENSOR_DISCREPANCY_TAG,
    SENSOR_FAILURE_TAG,
    WEATHER_ALERT_TAG,
)
from .models import (
    AlertMemory,
    Classification,
    NotificationEvent,
    RiskStatement,
    SensorHealthMemory,
    SensorStatus,
    Severity,
)

logger = logging.getLogger(__name__)


_SENSOR_ALERTS = {
    SensorStatus.DISCREPANCY: (
        "⚠️ Sensor Mismatch",
        "Left/Right sensors differ >3°C. Readings averaged. Check sensor placement.",
        SENSOR_DISCREPANCY_TAG,
    ),
    SensorStatus.SINGLE_FAILURE: (
        "🔌 Sensor Failure",
        "One DHT22 sensor is offline. Redundancy mode active.",
        SENSOR_FAILURE_TAG,
    ),
}


class AlertDispatcher:
    """
    Turns classifications and sensor-health changes into notification events without flooding the user.

    Two single-slot memories are kept apart: a sensor-health alert and a
    quality alert can both fire in the same cycle without resetting each other.
    The pure ``dispatch``/``dispatch_sensor_health`` functions do the deduplication;
    the instance methods hold the memories between cycles.
    """

    def __init__(self, notifications_enabled: bool = False) -> None:
        self.notifications_enabled = notifications_enabled
        self.quality_memory = AlertMemory()
        self.sensor_memory = SensorHealthMemory()

    # -------------------------------------------------------------------------
    # Pure dedup policy
    # -------------------------------------------------------------------------

    @staticmethod
    def dispatch(
        classification: Classification, memory: AlertMemory
    ) -> Tuple[List[NotificationEvent], AlertMemory]:
        if classification.message == memory.last_message or classification.severity == Severity.neutral:
            return [], memory

        title, tag = AlertDispatcher.presentation_for(classification.severity)
        event = NotificationEvent(
            title=title,
            body=f"{classification.message} — {classification.action}",
            tag=tag,
            severity=classification.severity,
        )
        new_memory = AlertMemory(
            last_message=classification.message,
            last_severity=classification.severity,
        )
        return [event], new_memory

    @staticmethod
    def dispatch_sensor_health(
        status: SensorStatus, memory: SensorHealthMemory
    ) -> Tuple[List[NotificationEvent], SensorHealthMemory]:
        if status == SensorStatus.NORMAL:
            # Recovery re-arms the slot so a recurring fault is announced again.
            return [], SensorHealthMemory()

        alert = _SENSOR_ALERTS.get(status)
        if alert is None or memory.last_status == status.value:
            return [], memory

        title, body, tag = alert
        event = NotificationEvent(title=title, body=body, tag=tag, severity=Severity.warning)
        return [event], SensorHealthMemory(last_status=status.value)

    @staticmethod
    def presentation_for(severity) -> Tuple[str, str]:
        """Fixed (title, tag) pair for a severity; anything unmapped is presented as info."""
        key = severity.value if isinstance(severity, Severity) else str(severity)
        return NOTIFICATION_MAP.get(key, NOTIFICATION_MAP["info"])

    @staticmethod
    def weather_events(risks: List[RiskStatement], location_name: str) -> List[NotificationEvent]:
        return [
            NotificationEvent(
                title=risk.title,
                body=f"{location_name}: {risk.alert or risk.text}",
                tag=WEATHER_ALERT_TAG,
                severity=risk.level,
            )
            for risk in risks
        ]

    # -------------------------------------------------------------------------
    # Stateful wrapper
    # -------------------------------------------------------------------------

    def set_notifications_enabled(self, enabled: bool) -> None:
        """Disabling forgets the last quality message so re-enabling re-announces the current state."""
        if not enabled:
            self.quality_memory = AlertMemory()
        self.notifications_enabled = enabled

    def notify(self, classification: Classification, sensor_status=None) -> List[NotificationEvent]:
        if not self.notifications_enabled:
            return []

        events: List[NotificationEvent] = []
        if sensor_status is not None:
            sensor_events, self.sensor_memory = self.dispatch_sensor_health(sensor_status, self.sensor_memory)
            events.extend(sensor_events)

        quality_events, self.quality_memory = self.dispatch(classification, self.quality_memory)
        events.extend(quality_events)

        for event in events:
            logger.debug("Dispatching %s", event.title, extra={"tag": event.tag, "severity": event.severity.value})
        return events

    def notify_weather(self, risks: List[RiskStatement], location_name: str) -> List[NotificationEvent]:
        if not self.notifications_enabled:
            return []
        return self.weather_events(risks, location_name)
