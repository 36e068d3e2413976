import logging
from typing import Callable, Optional, Sequence, Tuple

import numpy as np
from scipy.stats import linregress

from .config import (
    ESTIMATOR_DAYS_THRESHOLD_HOURS,
    ESTIMATOR_MIN_ELAPSED_HOURS,
    ESTIMATOR_MIN_SAMPLES,
    ESTIMATOR_OUTLIER_HOURS,
    ESTIMATOR_WINDOW,
)
from .models import CompletionEstimate, EstimateStatus, HistorySample

logger = logging.getLogger(__name__)


class CompletionEstimator:
    """
    Extrapolates the drying moisture trend to an ETA for the target moisture.
    V1 projects through the two window endpoints; V2 fits a least-squares line over the whole window.
    """

    @classmethod
    def estimate(
        cls, history: Sequence[HistorySample], target_moisture: float
    ) -> Optional[CompletionEstimate]:
        """Main pipeline: window → endpoint rate → remaining moisture → formatted ETA."""
        return cls._run_estimation_pipeline(history, target_moisture, rate_fn=cls._endpoint_rate)

    @classmethod
    def estimate_v2(
        cls, history: Sequence[HistorySample], target_moisture: float
    ) -> Optional[CompletionEstimate]:
        """V2 pipeline: same contract, drying rate taken from a regression slope."""
        return cls._run_estimation_pipeline(history, target_moisture, rate_fn=cls._regression_rate)

    @classmethod
    def _run_estimation_pipeline(
        cls,
        history: Sequence[HistorySample],
        target_moisture: float,
        rate_fn: Callable[[np.ndarray, np.ndarray], float],
    ) -> Optional[CompletionEstimate]:
        """
        Shared wrapper: returns None whenever there is no reliable rate
        (too few samples, too short a span, or moisture not decreasing).
        """
        if not history or len(history) < ESTIMATOR_MIN_SAMPLES:
            return None

        window = list(history)[-ESTIMATOR_WINDOW:]
        hours, moisture = cls._extract_signals(window)

        elapsed_hours = hours[-1] - hours[0]
        moisture_change = moisture[0] - moisture[-1]
        if elapsed_hours <= ESTIMATOR_MIN_ELAPSED_HOURS or moisture_change <= 0:
            return None

        rate_per_hour = rate_fn(hours, moisture)
        if rate_per_hour <= 0:
            return None

        remaining = float(moisture[-1]) - target_moisture
        if remaining <= 0:
            return CompletionEstimate(status=EstimateStatus.ready, hours_left=0.0, label="Ready Now")

        hours_left = remaining / rate_per_hour
        logger.debug(
            "Drying trend: %.3f %%MC/h over %.2f h, %.2f h to target",
            rate_per_hour,
            elapsed_hours,
            hours_left,
        )
        return cls._format_eta(hours_left)

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    @staticmethod
    def _extract_signals(window: Sequence[HistorySample]) -> Tuple[np.ndarray, np.ndarray]:
        """Hours since the first sample and the moisture series, as NumPy arrays."""
        origin = window[0].timestamp
        hours = np.array(
            [(sample.timestamp - origin).total_seconds() / 3600.0 for sample in window],
            dtype=float,
        )
        moisture = np.array([sample.moisture for sample in window], dtype=float)
        return hours, moisture

    @staticmethod
    def _endpoint_rate(hours: np.ndarray, moisture: np.ndarray) -> float:
        return float((moisture[0] - moisture[-1]) / (hours[-1] - hours[0]))

    @staticmethod
    def _regression_rate(hours: np.ndarray, moisture: np.ndarray) -> float:
        fit = linregress(hours, moisture)
        return float(-fit.slope)

    @staticmethod
    def _format_eta(hours_left: float) -> CompletionEstimate:
        if hours_left > ESTIMATOR_OUTLIER_HOURS:
            return CompletionEstimate(status=EstimateStatus.outlier, hours_left=None, label="> 10 Days")

        if hours_left < ESTIMATOR_DAYS_THRESHOLD_HOURS:
            label = f"{hours_left:.1f} hrs"
        else:
            label = f"{hours_left / 24:.1f} days"

        return CompletionEstimate(
            status=EstimateStatus.estimated,
            hours_left=round(hours_left, 1),
            label=label,
        )
