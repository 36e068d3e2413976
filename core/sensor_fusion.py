from .config import SENSOR_DISCREPANCY_TOLERANCE
from .models import FusedReading, SensorReading, SensorStatus


class SensorFusion:
    """
    Combines the left/right drying-station probes into one effective reading plus a health status.
    Values are averaged even when the probes disagree; DISCREPANCY marks them as lower-confidence.
    """

    @staticmethod
    def fuse(s1: SensorReading, s2: SensorReading) -> FusedReading:
        if s1.is_valid and s2.is_valid:
            status = SensorStatus.NORMAL
            if abs(s1.temperature - s2.temperature) > SENSOR_DISCREPANCY_TOLERANCE:
                status = SensorStatus.DISCREPANCY
            return FusedReading(
                temperature=(s1.temperature + s2.temperature) / 2,
                humidity=(s1.humidity + s2.humidity) / 2,
                status=status,
            )

        # Redundancy mode: exactly one probe still reporting
        if s1.is_valid or s2.is_valid:
            survivor = s1 if s1.is_valid else s2
            return FusedReading(
                temperature=survivor.temperature,
                humidity=survivor.humidity,
                status=SensorStatus.SINGLE_FAILURE,
            )

        return FusedReading(temperature=0.0, humidity=0.0, status=SensorStatus.OFFLINE)
