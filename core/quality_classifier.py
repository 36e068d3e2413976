from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Optional

from .config import (
    BURNT_TEMPERATURE_CEILING,
    DEFAULT_DRY_MAX_HUMI,
    DEFAULT_DRY_MAX_TEMP,
    DEFAULT_DRY_TARGET_MOISTURE,
    DEFAULT_ROAST_MAX_TEMP,
    DEFAULT_ROAST_MIN_TEMP,
    EMPTY_TRAY_WEIGHT,
    FERMENTATION_MOISTURE_FLOOR,
    OVER_DRIED_MOISTURE_CEILING,
)
from .models import Classification, ProcessStage, Severity, Thresholds


@dataclass(frozen=True)
class _Inputs:
    temperature: float
    humidity: float
    weight: float
    moisture: float
    max_temp: float
    max_humi: float
    target_moisture: float
    roast_min: float
    roast_max: float


class _Rule(NamedTuple):
    guard: Callable[[_Inputs], bool]
    build: Callable[[_Inputs], Classification]


WAITING_FOR_DATA = Classification(
    message="WAITING FOR DATA...",
    action="Check sensor connections.",
    severity=Severity.neutral,
)


def _pick(value: Optional[float], default: float) -> float:
    return default if value is None else value


# Drying rules, evaluated top to bottom; the first guard that holds wins.
_DRYING_RULES: List[_Rule] = [
    _Rule(
        guard=lambda x: x.weight < EMPTY_TRAY_WEIGHT,
        build=lambda x: Classification(
            message="WAITING FOR BEANS... (Load Cell Empty)",
            action="Place fresh coffee cherries on the drying tray to begin monitoring.",
            severity=Severity.neutral,
        ),
    ),
    _Rule(
        guard=lambda x: 0 < x.moisture < OVER_DRIED_MOISTURE_CEILING,
        build=lambda x: Classification(
            message=f"CRITICAL: OVER-DRIED! ({x.moisture:.1f}% MC)",
            action="REMOVE BEANS IMMEDIATELY! Quality is degrading due to low moisture.",
            severity=Severity.critical,
        ),
    ),
    _Rule(
        guard=lambda x: x.temperature > x.max_temp and x.moisture > FERMENTATION_MOISTURE_FLOOR,
        build=lambda x: Classification(
            message="CRITICAL: FERMENTATION RISK (Hot & Wet)",
            action="LOWER TEMPERATURE & INCREASE AIRFLOW! Stir beans to dissipate heat.",
            severity=Severity.critical,
        ),
    ),
    _Rule(
        guard=lambda x: x.humidity > x.max_humi,
        build=lambda x: Classification(
            message=f"WARNING: TOO HUMID ({x.humidity:.1f}%)",
            action="Protect beans from moisture re-absorption. Cover or use dehumidifier.",
            severity=Severity.warning,
        ),
    ),
    _Rule(
        guard=lambda x: 0 < x.moisture <= x.target_moisture,
        build=lambda x: Classification(
            message=f"OPTIMAL: DRYING COMPLETE ({x.moisture:.1f}% MC)",
            action="HARVEST NOW. Beans are ready for storage or roasting.",
            severity=Severity.success,
        ),
    ),
    _Rule(
        guard=lambda x: True,
        build=lambda x: Classification(
            message=f"OPTIMAL: DRYING IN PROGRESS ({x.moisture:.1f}% MC)",
            action="Maintain current conditions. Monitor periodically.",
            severity=Severity.info,
        ),
    ),
]

# Roasting rules. Temperatures between the optimal max and the burnt ceiling
# match nothing and fall through to WAITING_FOR_DATA.
_ROASTING_RULES: List[_Rule] = [
    _Rule(
        guard=lambda x: x.temperature >= BURNT_TEMPERATURE_CEILING,
        build=lambda x: Classification(
            message=f"CRITICAL: BURNT / OVER-ROASTED ({x.temperature:g}°C)",
            action="EMERGENCY STOP! Turn off heat and dump beans to cooling tray.",
            severity=Severity.critical,
        ),
    ),
    _Rule(
        guard=lambda x: x.roast_min <= x.temperature <= x.roast_max,
        build=lambda x: Classification(
            message="OPTIMAL: TARGET ROAST LEVEL ACHIEVED",
            action="Prepare to drop beans. Monitor color for desired roast (Medium/Dark).",
            severity=Severity.success,
        ),
    ),
    _Rule(
        guard=lambda x: x.temperature < x.roast_min,
        build=lambda x: Classification(
            message="INFO: ROASTING IN PROGRESS (Developing)",
            action="Monitor Rate of Rise (RoR). Listen for First Crack.",
            severity=Severity.info,
        ),
    ),
]


class QualityClassifier:
    """
    Rule-based quality state per processing stage.
    Pure and deterministic: the same readings and thresholds always give the same Classification.
    """

    @classmethod
    def classify(
        cls,
        stage,
        temperature: float,
        humidity: float,
        weight: float,
        moisture: float,
        thresholds: Optional[Thresholds] = None,
    ) -> Classification:
        inputs = cls._resolve(temperature, humidity, weight, moisture, thresholds or Thresholds())

        if stage == ProcessStage.drying:
            rules = _DRYING_RULES
        elif stage == ProcessStage.roasting:
            rules = _ROASTING_RULES
        else:
            return WAITING_FOR_DATA

        for rule in rules:
            if rule.guard(inputs):
                return rule.build(inputs)
        return WAITING_FOR_DATA

    @staticmethod
    def _resolve(
        temperature: float,
        humidity: float,
        weight: float,
        moisture: float,
        thresholds: Thresholds,
    ) -> _Inputs:
        """Snapshot the readings together with the effective limits for this evaluation."""
        return _Inputs(
            temperature=temperature,
            humidity=humidity,
            weight=weight,
            moisture=moisture,
            max_temp=_pick(thresholds.dry_max_temp, DEFAULT_DRY_MAX_TEMP),
            max_humi=_pick(thresholds.dry_max_humi, DEFAULT_DRY_MAX_HUMI),
            target_moisture=_pick(thresholds.dry_target_moisture, DEFAULT_DRY_TARGET_MOISTURE),
            roast_min=_pick(thresholds.roast_min_temp, DEFAULT_ROAST_MIN_TEMP),
            roast_max=_pick(thresholds.roast_max_temp, DEFAULT_ROAST_MAX_TEMP),
        )
