# tests/core/test_weather_risk.py

from core.models import (
    Classification,
    DailyForecast,
    ProcessStage,
    Severity,
    Thresholds,
    WeatherSnapshot,
)
from core.weather_risk import COMPOUNDED_RISK_MESSAGE, WeatherRiskEvaluator


CALM = WeatherSnapshot(temperature=27.0, humidity=55.0, precipitation=0.0, weather_code=1)
IN_PROGRESS = Classification(
    message="OPTIMAL: DRYING IN PROGRESS (30.0% MC)",
    action="Maintain current conditions. Monitor periodically.",
    severity=Severity.info,
)


def test_calm_weather_has_no_risks():
    assert WeatherRiskEvaluator.evaluate_risk(CALM, ProcessStage.drying) == []


def test_roasting_and_missing_snapshot_are_ignored():
    storm = WeatherSnapshot(temperature=40.0, humidity=95.0, precipitation=12.0, weather_code=95)

    assert WeatherRiskEvaluator.evaluate_risk(storm, ProcessStage.roasting) == []
    assert WeatherRiskEvaluator.evaluate_risk(None, ProcessStage.drying) == []


def test_all_independent_checks_can_fire_together():
    """Humidity, heat, rain and storm each contribute a statement."""
    storm = WeatherSnapshot(temperature=36.0, humidity=80.0, precipitation=2.5, weather_code=95)

    risks = WeatherRiskEvaluator.evaluate_risk(storm, "Drying")

    assert [r.level for r in risks] == [
        Severity.critical,
        Severity.warning,
        Severity.critical,
        Severity.critical,
    ]
    assert "80% RH" in risks[0].text
    assert "2.5mm" in risks[2].text
    assert risks[0].alert == "80% RH — Mold risk elevated. Protect drying beans."
    assert risks[3].alert == "Severe weather — Do not begin a new drying cycle."


def test_elevated_humidity_is_a_warning_only():
    humid = WeatherSnapshot(temperature=28.0, humidity=70.0)

    risks = WeatherRiskEvaluator.evaluate_risk(humid, ProcessStage.drying)

    assert len(risks) == 1
    assert risks[0].level == Severity.warning


def test_humidity_boundaries():
    at_warning = WeatherSnapshot(temperature=28.0, humidity=65.0)
    at_critical = WeatherSnapshot(temperature=28.0, humidity=75.0)

    assert WeatherRiskEvaluator.evaluate_risk(at_warning, ProcessStage.drying) == []
    assert WeatherRiskEvaluator.evaluate_risk(at_critical, ProcessStage.drying)[0].level == Severity.warning


def test_escalation_fires_when_all_conditions_hold():
    humid = WeatherSnapshot(temperature=29.0, humidity=70.0)

    result = WeatherRiskEvaluator.escalate(IN_PROGRESS, humid, ProcessStage.drying, 68.0, Thresholds())

    assert result.severity == Severity.critical
    assert result.message == COMPOUNDED_RISK_MESSAGE


def test_escalation_needs_indoor_humidity_over_threshold():
    """Extreme outdoor humidity alone does not escalate."""
    soaked = WeatherSnapshot(temperature=29.0, humidity=99.0, precipitation=5.0)

    result = WeatherRiskEvaluator.escalate(IN_PROGRESS, soaked, ProcessStage.drying, 60.0, Thresholds())

    assert result == IN_PROGRESS


def test_escalation_needs_outdoor_humidity_over_limit():
    dry_outside = WeatherSnapshot(temperature=29.0, humidity=65.0)

    result = WeatherRiskEvaluator.escalate(IN_PROGRESS, dry_outside, ProcessStage.drying, 90.0, Thresholds())

    assert result == IN_PROGRESS


def test_escalation_never_touches_critical_results():
    critical = Classification(message="CRITICAL: FERMENTATION RISK (Hot & Wet)", action="...", severity=Severity.critical)
    humid = WeatherSnapshot(temperature=29.0, humidity=90.0)

    assert WeatherRiskEvaluator.escalate(critical, humid, ProcessStage.drying, 90.0, Thresholds()) is critical


def test_escalation_uses_configured_indoor_limit():
    humid = WeatherSnapshot(temperature=29.0, humidity=70.0)

    relaxed = WeatherRiskEvaluator.escalate(IN_PROGRESS, humid, ProcessStage.drying, 68.0, Thresholds(dry_max_humi=75.0))
    defaulted = WeatherRiskEvaluator.escalate(IN_PROGRESS, humid, ProcessStage.drying, 68.0, Thresholds(dry_max_humi=None))

    assert relaxed == IN_PROGRESS
    assert defaulted.severity == Severity.critical


def test_drying_impact_labels():
    assert WeatherRiskEvaluator.drying_impact(WeatherSnapshot(temperature=28.0, humidity=80.0)).label == "Poor Drying Conditions"
    assert WeatherRiskEvaluator.drying_impact(WeatherSnapshot(temperature=28.0, humidity=70.0)).label == "Moderate Conditions"
    assert WeatherRiskEvaluator.drying_impact(WeatherSnapshot(temperature=37.0, humidity=50.0)).label == "Heat Caution"
    assert WeatherRiskEvaluator.drying_impact(CALM).label == "Favorable for Drying"


def test_weather_labels():
    assert WeatherRiskEvaluator.weather_label(0) == "Clear Sky"
    assert WeatherRiskEvaluator.weather_label(2) == "Partly Cloudy"
    assert WeatherRiskEvaluator.weather_label(45) == "Foggy / Overcast"
    assert WeatherRiskEvaluator.weather_label(63) == "Rainy"
    assert WeatherRiskEvaluator.weather_label(75) == "Snow / Sleet"
    assert WeatherRiskEvaluator.weather_label(95) == "Thunderstorm"
    assert WeatherRiskEvaluator.weather_label(120) == "Unknown"


def test_rainy_days_from_daily_forecast():
    snapshot = WeatherSnapshot(
        temperature=28.0,
        humidity=60.0,
        daily_forecast=[
            DailyForecast(date="2025-08-01", precipitation_sum=0.2, precipitation_probability=10),
            DailyForecast(date="2025-08-02", precipitation_sum=4.0, precipitation_probability=30),
            DailyForecast(date="2025-08-03", precipitation_sum=0.0, precipitation_probability=70),
            DailyForecast(date="2025-08-04", precipitation_sum=1.0, precipitation_probability=None),
        ],
    )

    assert [day.date for day in WeatherRiskEvaluator.rainy_days(snapshot)] == ["2025-08-02", "2025-08-03"]
