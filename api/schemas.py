"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.models import (
    Classification,
    CompletionEstimate,
    DailyForecast,
    DryingImpact,
    FusedReading,
    Location,
    ProcessStage,
    RiskStatement,
    WeatherSnapshot,
)


class StageUpdate(BaseModel):
    stage: ProcessStage


class LocationSelection(BaseModel):
    name: str = Field(..., min_length=1, description="One of the names returned by /locations.")


class SettingsUpdate(BaseModel):
    """Partial settings write; omitted keys are left unchanged."""

    model_config = ConfigDict(populate_by_name=True)

    notifications_enabled: Optional[bool] = Field(default=None, alias="notificationsEnabled")
    show_weather: Optional[bool] = Field(default=None, alias="showWeather")
    auto_refresh: Optional[bool] = Field(default=None, alias="autoRefresh")


class SettingsView(BaseModel):
    notificationsEnabled: bool
    showWeather: bool
    autoRefresh: bool


class StatusReport(BaseModel):
    stage: ProcessStage
    classification: Classification
    fused: Optional[FusedReading] = None
    roaster_temperature: Optional[float] = None
    weight: Optional[str] = Field(default=None, description="Load cell reading formatted for display.")
    moisture: Optional[float] = None
    estimate: Optional[CompletionEstimate] = None
    weather_risks: List[RiskStatement] = Field(default_factory=list)


class WeatherReport(BaseModel):
    location: Optional[Location] = None
    weather: Optional[WeatherSnapshot] = None
    error: Optional[str] = None
    condition: Optional[str] = None
    impact: Optional[DryingImpact] = None
    rainy_days: List[DailyForecast] = Field(default_factory=list)
    risks: List[RiskStatement] = Field(default_factory=list)
    last_checked: Optional[datetime] = None
