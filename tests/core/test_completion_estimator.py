# tests/core/test_completion_estimator.py

from datetime import datetime, timedelta, timezone

from core.completion_estimator import CompletionEstimator
from core.config import ESTIMATOR_MIN_SAMPLES
from core.models import EstimateStatus, HistorySample


START = datetime(2025, 8, 1, 8, 0, tzinfo=timezone.utc)


def _history(moistures, step_minutes=5.0):
    return [
        HistorySample(timestamp=START + timedelta(minutes=i * step_minutes), weight=5.0, moisture=m)
        for i, m in enumerate(moistures)
    ]


def test_too_few_samples_returns_none():
    """Fewer than the minimum sample count never yields an estimate."""
    steep = _history([40.0 - i * 2 for i in range(ESTIMATOR_MIN_SAMPLES - 1)], step_minutes=30)

    assert CompletionEstimator.estimate(steep, 12.0) is None
    assert CompletionEstimator.estimate([], 12.0) is None


def test_constant_moisture_returns_none():
    flat = _history([30.0] * 20)

    assert CompletionEstimator.estimate(flat, 12.0) is None


def test_rising_moisture_returns_none():
    rising = _history([20.0 + i * 0.1 for i in range(20)])

    assert CompletionEstimator.estimate(rising, 12.0) is None


def test_span_of_three_minutes_or_less_returns_none():
    """Ten samples 20 s apart cover only 3 minutes."""
    quick = _history([30.0 - i for i in range(10)], step_minutes=1 / 3)

    assert CompletionEstimator.estimate(quick, 12.0) is None


def test_target_already_reached_is_ready_now():
    samples = _history([14.0 - i * 0.5 for i in range(12)])

    result = CompletionEstimator.estimate(samples, 12.0)

    assert result.status == EstimateStatus.ready
    assert result.label == "Ready Now"


def test_hours_estimate():
    """10 %MC lost over 9 hours, 9 %MC to go: 8.1 hours left."""
    samples = _history([30.0 - i * (10.0 / 9) for i in range(10)], step_minutes=60)

    result = CompletionEstimator.estimate(samples, 11.0)

    assert result.status == EstimateStatus.estimated
    assert result.label == "8.1 hrs"
    assert result.hours_left == 8.1


def test_days_estimate():
    """1 %MC per hour with 48 %MC remaining is two days."""
    samples = _history([70.0 - i for i in range(11)], step_minutes=60)

    result = CompletionEstimator.estimate(samples, 12.0)

    assert result.status == EstimateStatus.estimated
    assert result.label == "2.0 days"


def test_far_future_is_outlier():
    samples = _history([50.0 - i * 0.01 for i in range(10)], step_minutes=60)

    result = CompletionEstimator.estimate(samples, 12.0)

    assert result.status == EstimateStatus.outlier
    assert result.label == "> 10 Days"
    assert result.hours_left is None


def test_only_last_sixty_samples_are_used():
    """An early fast drop outside the window must not influence the rate."""
    early = [90.0 - i for i in range(40)]
    recent = [early[-1] - i * 0.1 for i in range(1, 61)]
    samples = _history(early + recent, step_minutes=6)

    result = CompletionEstimator.estimate(samples, 12.0)

    # Window: 59 steps of 6 min = 5.9 h, 5.9 %MC lost -> 1 %MC/h
    remaining = recent[-1] - 12.0
    assert result.status == EstimateStatus.estimated
    assert result.hours_left == round(remaining, 1)


def test_regression_estimator_matches_on_linear_trend():
    """On a perfectly linear curve both estimators agree."""
    samples = _history([40.0 - i * 0.5 for i in range(30)], step_minutes=30)

    v1 = CompletionEstimator.estimate(samples, 12.0)
    v2 = CompletionEstimator.estimate_v2(samples, 12.0)

    assert v1.status == v2.status == EstimateStatus.estimated
    assert abs(v1.hours_left - v2.hours_left) < 0.05


def test_regression_estimator_shares_the_guards():
    assert CompletionEstimator.estimate_v2(_history([30.0] * 20), 12.0) is None
    assert CompletionEstimator.estimate_v2(_history([30.0, 29.0]), 12.0) is None
