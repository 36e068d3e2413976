from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .config import (
    DEFAULT_DRY_MAX_HUMI,
    DEFAULT_DRY_MAX_TEMP,
    DEFAULT_DRY_TARGET_MOISTURE,
    DEFAULT_ROAST_MAX_TEMP,
    DEFAULT_ROAST_MIN_TEMP,
)


class ProcessStage(str, Enum):
    drying = "Drying"
    roasting = "Roasting"


class Severity(str, Enum):
    neutral = "neutral"
    info = "info"
    success = "success"
    warning = "warning"
    critical = "critical"


class SensorStatus(str, Enum):
    """Health of the redundant probe pair after fusion."""

    NORMAL = "NORMAL"
    DISCREPANCY = "DISCREPANCY"
    SINGLE_FAILURE = "SINGLE_FAILURE"
    OFFLINE = "OFFLINE"


class SensorReading(BaseModel):
    """One probe's output. A temperature of 0 is the hardware's "no data" sentinel."""

    temperature: float = 0.0
    humidity: float = 0.0

    @property
    def is_valid(self) -> bool:
        return self.temperature > 0


class FusedReading(BaseModel):
    temperature: float
    humidity: float
    status: SensorStatus


class Thresholds(BaseModel):
    """Operator-editable limits. A field set to None falls back to the built-in default."""

    dry_max_temp: Optional[float] = DEFAULT_DRY_MAX_TEMP
    dry_max_humi: Optional[float] = DEFAULT_DRY_MAX_HUMI
    dry_target_moisture: Optional[float] = DEFAULT_DRY_TARGET_MOISTURE
    roast_min_temp: Optional[float] = DEFAULT_ROAST_MIN_TEMP
    roast_max_temp: Optional[float] = DEFAULT_ROAST_MAX_TEMP


class Classification(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    action: str
    severity: Severity


class HistorySample(BaseModel):
    timestamp: datetime
    weight: float = 0.0
    moisture: float = 0.0
    humidity: float = 0.0
    temperature: float = 0.0


class AlertMemory(BaseModel):
    model_config = ConfigDict(frozen=True)

    last_message: str = ""
    last_severity: Severity = Severity.neutral


class SensorHealthMemory(BaseModel):
    model_config = ConfigDict(frozen=True)

    last_status: str = ""


class NotificationEvent(BaseModel):
    title: str
    body: str
    tag: str
    severity: Severity


class DailyForecast(BaseModel):
    date: str
    weather_code: int = 0
    precipitation_sum: float = 0.0
    precipitation_probability: Optional[float] = None


class WeatherSnapshot(BaseModel):
    temperature: float
    humidity: float
    precipitation: float = 0.0
    wind_speed: float = 0.0
    weather_code: int = 0
    daily_forecast: List[DailyForecast] = Field(default_factory=list)


class RiskStatement(BaseModel):
    level: Severity
    title: str
    text: str
    alert: str = Field(default="", description="Shorter push-notification body; falls back to text.")


class DryingImpact(BaseModel):
    label: str
    level: Severity
    note: str


class EstimateStatus(str, Enum):
    ready = "ready"
    estimated = "estimated"
    outlier = "outlier"


class CompletionEstimate(BaseModel):
    status: EstimateStatus
    hours_left: Optional[float] = None
    label: str


class Location(BaseModel):
    name: str
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class TelemetrySnapshot(BaseModel):
    """
    One delivery from the telemetry store.

    Fields are None when the store did not carry them; the fusion boundary maps
    absent values to the 0 sentinel.
    """

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    temp_left: Optional[float] = None
    humi_left: Optional[float] = None
    temp_right: Optional[float] = None
    humi_right: Optional[float] = None
    weight: Optional[float] = None
    moisture: Optional[float] = None
    roaster_temperature: Optional[float] = None

    @property
    def left(self) -> SensorReading:
        return SensorReading(temperature=self.temp_left or 0.0, humidity=self.humi_left or 0.0)

    @property
    def right(self) -> SensorReading:
        return SensorReading(temperature=self.temp_right or 0.0, humidity=self.humi_right or 0.0)


class CycleResult(BaseModel):
    """Everything one ingest cycle produced."""

    stage: ProcessStage
    fused: Optional[FusedReading] = None
    classification: Classification
    estimate: Optional[CompletionEstimate] = None
    weather_risks: List[RiskStatement] = Field(default_factory=list)
    events: List[NotificationEvent] = Field(default_factory=list)
