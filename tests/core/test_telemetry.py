# tests/core/test_telemetry.py

from datetime import datetime, timezone

from core.formatting import format_weight
from core.models import SensorReading
from core.telemetry import parse_telemetry_tree


def test_full_tree_is_mapped():
    tree = {
        "drying": {
            "temp_left": 31.2,
            "humi_left": 58.0,
            "temp_right": 30.8,
            "humi_right": 60,
            "weight": 4.75,
            "current_moisture": 22.5,
        },
        "roaster": {"temperature": 201.0},
    }
    ts = datetime(2025, 8, 1, tzinfo=timezone.utc)

    snapshot = parse_telemetry_tree(tree, timestamp=ts)

    assert snapshot.timestamp == ts
    assert snapshot.left == SensorReading(temperature=31.2, humidity=58.0)
    assert snapshot.right == SensorReading(temperature=30.8, humidity=60.0)
    assert snapshot.weight == 4.75
    assert snapshot.moisture == 22.5
    assert snapshot.roaster_temperature == 201.0


def test_missing_and_non_numeric_fields_are_absent():
    """Absent leaves stay None and reach fusion as the 0 sentinel."""
    tree = {"drying": {"temp_left": "n/a", "humi_left": True, "weight": 2}}

    snapshot = parse_telemetry_tree(tree)

    assert snapshot.temp_left is None
    assert snapshot.humi_left is None
    assert snapshot.weight == 2.0
    assert snapshot.roaster_temperature is None
    assert snapshot.left == SensorReading(temperature=0.0, humidity=0.0)
    assert not snapshot.right.is_valid


def test_non_mapping_branches_are_ignored():
    snapshot = parse_telemetry_tree({"drying": [1, 2, 3], "roaster": 220})

    assert snapshot.weight is None
    assert snapshot.roaster_temperature is None


def test_format_weight():
    assert format_weight(0.85) == "850 g"
    assert format_weight(1.0) == "1.00 kg"
    assert format_weight(12.5) == "12.50 kg"
