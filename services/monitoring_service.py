"""Session-level orchestration: settings, weather refresh and telemetry ingest."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from threading import Lock
from typing import Any, Dict, List, Mapping, Optional

from core.alert_dispatcher import AlertDispatcher
from core.config import LOCATIONS
from core.ingest_loop import TelemetryIngestLoop
from core.models import (
    CycleResult,
    HistorySample,
    Location,
    NotificationEvent,
    ProcessStage,
    TelemetrySnapshot,
    Thresholds,
)
from core.refresh_scheduler import WeatherRefreshScheduler
from core.telemetry import parse_telemetry_tree
from integrations.notification_sink import LoggingNotificationSink
from integrations.settings_store import InMemorySettingsStore
from integrations.weather_client import WeatherClient, WeatherFetchError, build_default_weather_client
from settings import get_settings

logger = logging.getLogger(__name__)


def known_locations() -> List[Location]:
    return [Location(**entry) for entry in LOCATIONS]


def find_location(name: str) -> Optional[Location]:
    for location in known_locations():
        if location.name == name:
            return location
    return None


class MonitoringService:
    """
    Owns one monitoring session.

    All mutation of the ingest loop (buffers, alert memories, thresholds, weather
    state) happens under ``_lock``, giving the loop a single writer even though
    HTTP requests and the refresh timer run on different threads. Network I/O
    is done outside the lock.
    """

    def __init__(
        self,
        weather_client: WeatherClient,
        settings_store: InMemorySettingsStore,
        sink: LoggingNotificationSink,
        refresh_interval: float,
    ) -> None:
        self.weather_client = weather_client
        self.settings_store = settings_store
        self.sink = sink
        self.loop = TelemetryIngestLoop(dispatcher=AlertDispatcher())
        self.scheduler = WeatherRefreshScheduler(self.refresh_weather, refresh_interval)

        self.location: Optional[Location] = None
        self.show_weather = False
        self.auto_refresh = False
        self.last_weather_check: Optional[datetime] = None
        self._location_generation = 0
        self._lock = Lock()

        # Read once, then follow live updates.
        self._unsubscribe = settings_store.subscribe(self._apply_settings)

    # -------------------------------------------------------------------------
    # Telemetry
    # -------------------------------------------------------------------------

    def ingest_tree(self, tree: Mapping[str, Any]) -> CycleResult:
        return self.ingest(parse_telemetry_tree(tree))

    def ingest(self, snapshot: TelemetrySnapshot) -> CycleResult:
        with self._lock:
            result = self.loop.ingest(snapshot)
        self._deliver(result.events)
        return result

    def latest(self) -> Optional[CycleResult]:
        with self._lock:
            return self.loop.latest

    def latest_snapshot(self) -> Optional[TelemetrySnapshot]:
        with self._lock:
            return self.loop.latest_snapshot

    def history(self, stage: ProcessStage) -> List[HistorySample]:
        with self._lock:
            if stage == ProcessStage.roasting:
                return list(self.loop.roasting_history)
            return list(self.loop.drying_history)

    # -------------------------------------------------------------------------
    # Operator configuration
    # -------------------------------------------------------------------------

    def stage(self) -> ProcessStage:
        with self._lock:
            return self.loop.stage

    def set_stage(self, stage: ProcessStage) -> None:
        with self._lock:
            self.loop.set_stage(stage)
        logger.info("Process stage changed", extra={"stage": ProcessStage(stage).value})

    def thresholds(self) -> Thresholds:
        with self._lock:
            return self.loop.thresholds.model_copy()

    def set_thresholds(self, thresholds: Thresholds) -> None:
        with self._lock:
            self.loop.set_thresholds(thresholds)

    def settings(self) -> Dict[str, Any]:
        return self.settings_store.snapshot()

    def update_settings(self, changes: Mapping[str, Any]) -> Dict[str, Any]:
        """Write-through: the store notifies our subscription, which applies the change."""
        for key, value in changes.items():
            self.settings_store.set(key, value)
        return self.settings_store.snapshot()

    def _apply_settings(self, values: Mapping[str, Any]) -> None:
        with self._lock:
            self.loop.dispatcher.set_notifications_enabled(bool(values.get("notificationsEnabled", False)))
            self.show_weather = bool(values.get("showWeather", False))
            self.auto_refresh = bool(values.get("autoRefresh", False))
            location = self.location
        self.scheduler.configure(self.auto_refresh and location is not None)

    # -------------------------------------------------------------------------
    # Weather
    # -------------------------------------------------------------------------

    def select_location(self, location: Location) -> bool:
        with self._lock:
            self.location = location
            self._location_generation += 1
            auto_refresh = self.auto_refresh
        self.scheduler.configure(auto_refresh)
        return self.refresh_weather()

    def refresh_weather(self) -> bool:
        """
        Fetch and apply a snapshot for the selected location. Failures are reported, never raised.

        A result that lands after the location was changed is dropped.
        """
        with self._lock:
            location = self.location
            generation = self._location_generation
        if location is None:
            return False

        try:
            weather = self.weather_client.fetch(location)
        except WeatherFetchError as exc:
            with self._lock:
                if generation != self._location_generation:
                    return False
                self.loop.apply_weather_failure(str(exc))
                self.last_weather_check = datetime.now(timezone.utc)
            return False

        with self._lock:
            if generation != self._location_generation:
                logger.info("Discarding weather for a superseded location", extra={"location": location.name})
                return False
            events = self.loop.apply_weather(weather, location.name)
            self.last_weather_check = datetime.now(timezone.utc)
        self._deliver(events)
        return True

    def weather_state(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "location": self.location,
                "weather": self.loop.weather,
                "error": self.loop.weather_error,
                "stage": self.loop.stage,
                "last_checked": self.last_weather_check,
            }

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def shutdown(self) -> None:
        self.scheduler.cancel()
        self._unsubscribe()
        self.weather_client.close()

    def _deliver(self, events: List[NotificationEvent]) -> None:
        for event in events:
            self.sink.send(event.title, event.body, event.tag, event.severity)


@lru_cache
def build_default_service() -> MonitoringService:
    """Factory that wires the service with the default collaborators."""
    settings = get_settings()
    return MonitoringService(
        weather_client=build_default_weather_client(),
        settings_store=InMemorySettingsStore(),
        sink=LoggingNotificationSink(),
        refresh_interval=settings.weather_refresh_seconds,
    )
