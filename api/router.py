from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from core.formatting import format_weight
from core.models import (
    CycleResult,
    HistorySample,
    Location,
    NotificationEvent,
    ProcessStage,
    Thresholds,
)
from core.quality_classifier import WAITING_FOR_DATA
from core.weather_risk import WeatherRiskEvaluator
from services.monitoring_service import MonitoringService, build_default_service, known_locations
from .schemas import (
    LocationSelection,
    SettingsUpdate,
    SettingsView,
    StageUpdate,
    StatusReport,
    WeatherReport,
)
from .validation import resolve_location, validate_telemetry_input

router = APIRouter()


def get_service() -> MonitoringService:
    return build_default_service()


@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/telemetry", response_model=CycleResult)
def ingest_telemetry(tree: Dict[str, Any], service: MonitoringService = Depends(get_service)):
    # Validate input data
    validate_telemetry_input(tree)

    # Run one evaluation cycle
    return service.ingest_tree(tree)


@router.get("/status", response_model=StatusReport)
def status(service: MonitoringService = Depends(get_service)):
    result = service.latest()
    snapshot = service.latest_snapshot()
    stage = service.stage()

    if result is None or snapshot is None:
        return StatusReport(stage=stage, classification=WAITING_FOR_DATA)

    weight = snapshot.weight or 0.0
    return StatusReport(
        stage=result.stage,
        classification=result.classification,
        fused=result.fused,
        roaster_temperature=snapshot.roaster_temperature or 0.0,
        weight=format_weight(weight) if weight > 0 else None,
        moisture=snapshot.moisture,
        estimate=result.estimate,
        weather_risks=result.weather_risks,
    )


@router.put("/stage", response_model=StageUpdate)
def update_stage(request: StageUpdate, service: MonitoringService = Depends(get_service)):
    service.set_stage(request.stage)
    return request


@router.get("/thresholds", response_model=Thresholds)
def get_thresholds(service: MonitoringService = Depends(get_service)):
    return service.thresholds()


@router.put("/thresholds", response_model=Thresholds)
def replace_thresholds(request: Thresholds, service: MonitoringService = Depends(get_service)):
    service.set_thresholds(request)
    return service.thresholds()


@router.get("/settings", response_model=SettingsView)
def get_settings_view(service: MonitoringService = Depends(get_service)):
    return service.settings()


@router.put("/settings", response_model=SettingsView)
def update_settings(request: SettingsUpdate, service: MonitoringService = Depends(get_service)):
    changes = request.model_dump(by_alias=True, exclude_none=True)
    return service.update_settings(changes)


@router.get("/locations", response_model=List[Location])
def list_locations():
    return known_locations()


@router.get("/history/{stage}", response_model=List[HistorySample])
def history(stage: ProcessStage, service: MonitoringService = Depends(get_service)):
    return service.history(stage)


@router.get("/notifications", response_model=List[NotificationEvent])
def recent_notifications(service: MonitoringService = Depends(get_service)):
    return service.sink.recent()


@router.put("/weather/location", response_model=WeatherReport)
def select_location(request: LocationSelection, service: MonitoringService = Depends(get_service)):
    location = resolve_location(request.name)
    service.select_location(location)
    return _weather_report(service)


@router.post("/weather/refresh", response_model=WeatherReport)
def refresh_weather(service: MonitoringService = Depends(get_service)):
    service.refresh_weather()
    return _weather_report(service)


@router.get("/weather", response_model=WeatherReport)
def weather(service: MonitoringService = Depends(get_service)):
    return _weather_report(service)


def _weather_report(service: MonitoringService) -> WeatherReport:
    state = service.weather_state()
    snapshot = state["weather"]
    if snapshot is None:
        return WeatherReport(location=state["location"], error=state["error"], last_checked=state["last_checked"])

    return WeatherReport(
        location=state["location"],
        weather=snapshot,
        condition=WeatherRiskEvaluator.weather_label(snapshot.weather_code),
        impact=WeatherRiskEvaluator.drying_impact(snapshot),
        rainy_days=WeatherRiskEvaluator.rainy_days(snapshot),
        risks=WeatherRiskEvaluator.evaluate_risk(snapshot, state["stage"]),
        last_checked=state["last_checked"],
    )
