from datetime import datetime
from typing import Any, Mapping, Optional

from .models import TelemetrySnapshot


# Telemetry store path -> snapshot field
TELEMETRY_FIELDS = {
    ("drying", "temp_left"): "temp_left",
    ("drying", "humi_left"): "humi_left",
    ("drying", "temp_right"): "temp_right",
    ("drying", "humi_right"): "humi_right",
    ("drying", "weight"): "weight",
    ("drying", "current_moisture"): "moisture",
    ("roaster", "temperature"): "roaster_temperature",
}


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def parse_telemetry_tree(tree: Mapping[str, Any], timestamp: Optional[datetime] = None) -> TelemetrySnapshot:
    """
    Map the telemetry store's tree onto a snapshot.

    Missing branches, missing leaves and non-numeric leaves all come through as None.
    """
    values = {}
    for (branch, leaf), field_name in TELEMETRY_FIELDS.items():
        node = tree.get(branch) if isinstance(tree, Mapping) else None
        if not isinstance(node, Mapping):
            continue
        number = _as_number(node.get(leaf))
        if number is not None:
            values[field_name] = number

    if timestamp is not None:
        values["timestamp"] = timestamp
    return TelemetrySnapshot(**values)
