from typing import List, Optional

from .config import (
    DEFAULT_DRY_MAX_HUMI,
    OUTDOOR_HEAT_WARNING,
    OUTDOOR_HUMIDITY_CRITICAL,
    OUTDOOR_HUMIDITY_WARNING,
    RAINY_DAY_PRECIPITATION_SUM,
    RAINY_DAY_PROBABILITY,
    SEVERE_WEATHER_CODE,
)
from .models import (
    Classification,
    DailyForecast,
    DryingImpact,
    ProcessStage,
    RiskStatement,
    Severity,
    Thresholds,
    WeatherSnapshot,
)


COMPOUNDED_RISK_MESSAGE = "⚠️ COMPOUNDED RISK: Indoor + Outdoor Humidity Both Elevated"
COMPOUNDED_RISK_ACTION = (
    "URGENT: Both ambient and station humidity are above threshold. "
    "Cease drying, move beans to shelter, and run dehumidifier."
)


class WeatherRiskEvaluator:
    """
    Correlates outdoor conditions with the drying process.

    Unlike the quality classifier, the risk checks are independent: every check
    that holds contributes a statement. Only the Drying stage is affected.
    """

    @staticmethod
    def evaluate_risk(weather: Optional[WeatherSnapshot], stage) -> List[RiskStatement]:
        if weather is None or stage != ProcessStage.drying:
            return []

        risks: List[RiskStatement] = []
        humidity = weather.humidity
        temperature = weather.temperature

        if humidity > OUTDOOR_HUMIDITY_CRITICAL:
            risks.append(RiskStatement(
                level=Severity.critical,
                title="⚠️ High Humidity Alert",
                text=(
                    f"Outdoor humidity critically high ({humidity:g}% RH). Ambient air will re-absorb "
                    "moisture into beans, compounding fermentation risk."
                ),
                alert=f"{humidity:g}% RH — Mold risk elevated. Protect drying beans.",
            ))
        elif humidity > OUTDOOR_HUMIDITY_WARNING:
            risks.append(RiskStatement(
                level=Severity.warning,
                title="🌫️ Humidity Warning",
                text=(
                    f"Outdoor humidity elevated ({humidity:g}% RH), above the 65% mold-inhibition "
                    "threshold. Consider covered drying."
                ),
                alert=f"{humidity:g}% RH — Above safe 65% threshold. Monitor closely.",
            ))

        if temperature > OUTDOOR_HEAT_WARNING:
            risks.append(RiskStatement(
                level=Severity.warning,
                title="🌡️ Heat Warning",
                text=(
                    f"Outdoor temp {temperature:g}°C. Heat transfer may elevate drying station temp "
                    "toward the 40°C over-fermentation limit."
                ),
                alert=f"{temperature:g}°C outdoor — May push drying station above 40°C limit.",
            ))

        if weather.precipitation > 0:
            risks.append(RiskStatement(
                level=Severity.critical,
                title="🌧️ Rain Detected",
                text=(
                    f"Active precipitation ({weather.precipitation:g}mm) detected. Move beans indoors "
                    "or cover immediately."
                ),
                alert=f"{weather.precipitation:g}mm rain — Move beans indoors or cover immediately.",
            ))

        if weather.weather_code >= SEVERE_WEATHER_CODE:
            risks.append(RiskStatement(
                level=Severity.critical,
                title="⛈️ Storm Warning",
                text="Severe weather event in progress. Suspend outdoor drying immediately.",
                alert="Severe weather — Do not begin a new drying cycle.",
            ))

        return risks

    @staticmethod
    def escalate(
        classification: Classification,
        weather: Optional[WeatherSnapshot],
        stage,
        indoor_humidity: float,
        thresholds: Optional[Thresholds] = None,
    ) -> Classification:
        """Upgrade to a compounded-risk critical result when indoor and outdoor humidity are both high."""
        if weather is None or stage != ProcessStage.drying:
            return classification
        if classification.severity == Severity.critical:
            return classification

        max_humi = thresholds.dry_max_humi if thresholds is not None else None
        if max_humi is None:
            max_humi = DEFAULT_DRY_MAX_HUMI

        if weather.humidity > OUTDOOR_HUMIDITY_WARNING and indoor_humidity > max_humi:
            return classification.model_copy(update={
                "message": COMPOUNDED_RISK_MESSAGE,
                "action": COMPOUNDED_RISK_ACTION,
                "severity": Severity.critical,
            })
        return classification

    # -------------------------------------------------------------------------
    # Presentation helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def drying_impact(weather: WeatherSnapshot) -> DryingImpact:
        if weather.humidity > OUTDOOR_HUMIDITY_CRITICAL:
            return DryingImpact(
                label="Poor Drying Conditions",
                level=Severity.critical,
                note="High ambient humidity will slow moisture loss and raise mold risk.",
            )
        if weather.humidity > OUTDOOR_HUMIDITY_WARNING:
            return DryingImpact(
                label="Moderate Conditions",
                level=Severity.warning,
                note="Monitor closely. Consider cover drying to protect against re-absorption.",
            )
        if weather.temperature > OUTDOOR_HEAT_WARNING:
            return DryingImpact(
                label="Heat Caution",
                level=Severity.warning,
                note="High outdoor temp may raise drying station temp above 40°C threshold.",
            )
        return DryingImpact(
            label="Favorable for Drying",
            level=Severity.success,
            note="Ambient conditions support optimal drying. Proceed normally.",
        )

    @staticmethod
    def weather_label(code: int) -> str:
        """Coarse WMO weather-code label."""
        if code < 0:
            return "Unknown"
        if code == 0:
            return "Clear Sky"
        if code <= 3:
            return "Partly Cloudy"
        if code <= 48:
            return "Foggy / Overcast"
        if code <= 67:
            return "Rainy"
        if code <= 77:
            return "Snow / Sleet"
        if code <= 99:
            return "Thunderstorm"
        return "Unknown"

    @staticmethod
    def is_rainy_day(day: DailyForecast) -> bool:
        probability = day.precipitation_probability or 0
        return day.precipitation_sum > RAINY_DAY_PRECIPITATION_SUM or probability > RAINY_DAY_PROBABILITY

    @classmethod
    def rainy_days(cls, weather: WeatherSnapshot) -> List[DailyForecast]:
        return [day for day in weather.daily_forecast if cls.is_rainy_day(day)]
