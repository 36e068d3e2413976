import logging
from collections import deque
from typing import Callable, Deque, List, Optional, Sequence

from .alert_dispatcher import AlertDispatcher
from .completion_estimator import CompletionEstimator
from .config import (
    DEFAULT_DRY_TARGET_MOISTURE,
    DRYING_HISTORY_SIZE,
    ROASTING_HISTORY_SIZE,
)
from .models import (
    Classification,
    CompletionEstimate,
    CycleResult,
    HistorySample,
    NotificationEvent,
    ProcessStage,
    TelemetrySnapshot,
    Thresholds,
    WeatherSnapshot,
)
from .quality_classifier import WAITING_FOR_DATA, QualityClassifier
from .sensor_fusion import SensorFusion
from .weather_risk import WeatherRiskEvaluator

logger = logging.getLogger(__name__)

WEATHER_ERROR_MESSAGE = "Could not load weather data. Check your connection."

Estimator = Callable[[Sequence[HistorySample], float], Optional[CompletionEstimate]]


class TelemetryIngestLoop:
    """
    Orchestrates one evaluation cycle per telemetry snapshot.

    Owns the state that outlives a cycle: both history ring buffers, the alert
    memories (through the dispatcher) and the latest weather snapshot. It is not
    thread-safe; callers serialize access.
    """

    def __init__(
        self,
        dispatcher: Optional[AlertDispatcher] = None,
        thresholds: Optional[Thresholds] = None,
        stage: ProcessStage = ProcessStage.drying,
        estimator: Estimator = CompletionEstimator.estimate,
    ) -> None:
        self.dispatcher = dispatcher or AlertDispatcher()
        self.thresholds = thresholds or Thresholds()
        self.stage = stage
        self.estimator = estimator

        self.drying_history: Deque[HistorySample] = deque(maxlen=DRYING_HISTORY_SIZE)
        self.roasting_history: Deque[HistorySample] = deque(maxlen=ROASTING_HISTORY_SIZE)

        self.weather: Optional[WeatherSnapshot] = None
        self.weather_error: Optional[str] = None
        self.estimate: Optional[CompletionEstimate] = None
        self.latest: Optional[CycleResult] = None
        self.latest_snapshot: Optional[TelemetrySnapshot] = None

    def set_thresholds(self, thresholds: Thresholds) -> None:
        # Replace the whole record so no cycle ever sees a partial update.
        self.thresholds = thresholds.model_copy()

    def set_stage(self, stage: ProcessStage) -> None:
        self.stage = ProcessStage(stage)

    def ingest(self, snapshot: TelemetrySnapshot) -> CycleResult:
        thresholds = self.thresholds
        stage = self.stage

        # 1. Fuse the redundant probes
        fused = SensorFusion.fuse(snapshot.left, snapshot.right)
        weight = snapshot.weight or 0.0
        moisture = snapshot.moisture or 0.0
        roaster_temperature = snapshot.roaster_temperature or 0.0

        # 2. Extend the history buffers
        self.drying_history.append(HistorySample(
            timestamp=snapshot.timestamp,
            weight=weight,
            moisture=moisture,
            humidity=fused.humidity,
            temperature=fused.temperature,
        ))
        if roaster_temperature > 0:
            self.roasting_history.append(HistorySample(
                timestamp=snapshot.timestamp,
                temperature=roaster_temperature,
            ))

        # 3. Drying ETA
        target = thresholds.dry_target_moisture
        if target is None:
            target = DEFAULT_DRY_TARGET_MOISTURE
        self.estimate = self.estimator(self.drying_history, target)

        # 4. Classify, then let outdoor conditions escalate
        if stage == ProcessStage.roasting:
            classification = QualityClassifier.classify(stage, roaster_temperature, 0.0, 0.0, 0.0, thresholds)
            sensor_status = None
            risks = []
        else:
            classification = QualityClassifier.classify(
                stage, fused.temperature, fused.humidity, weight, moisture, thresholds
            )
            classification = WeatherRiskEvaluator.escalate(
                classification, self.weather, stage, fused.humidity, thresholds
            )
            sensor_status = fused.status
            risks = WeatherRiskEvaluator.evaluate_risk(self.weather, stage)

        # 5. Deduplicated notifications
        events = self.dispatcher.notify(classification, sensor_status)

        result = CycleResult(
            stage=stage,
            fused=fused if stage == ProcessStage.drying else None,
            classification=classification,
            estimate=self.estimate,
            weather_risks=risks,
            events=events,
        )
        self.latest = result
        self.latest_snapshot = snapshot
        logger.debug(
            "%s",
            classification.message,
            extra={"stage": stage.value, "severity": classification.severity.value, "status": fused.status.value},
        )
        return result

    def current_classification(self) -> Classification:
        if self.latest is None:
            return WAITING_FOR_DATA
        return self.latest.classification

    def apply_weather(self, weather: WeatherSnapshot, location_name: str) -> List[NotificationEvent]:
        """Store a freshly fetched snapshot and turn its risks into weather alerts."""
        self.weather = weather
        self.weather_error = None
        risks = WeatherRiskEvaluator.evaluate_risk(weather, self.stage)
        if not risks:
            logger.info(
                "%s: Conditions favorable for drying.", location_name, extra={"location": location_name}
            )
        return self.dispatcher.notify_weather(risks, location_name)

    def apply_weather_failure(self, reason: str) -> None:
        """A failed fetch drops the previous snapshot; the next refresh is the only retry."""
        self.weather = None
        self.weather_error = WEATHER_ERROR_MESSAGE
        logger.warning(WEATHER_ERROR_MESSAGE, extra={"reason": reason})
