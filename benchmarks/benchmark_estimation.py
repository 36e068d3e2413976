import time
from datetime import datetime, timedelta, timezone

import numpy as np

from core.completion_estimator import CompletionEstimator
from core.config import DEFAULT_DRY_TARGET_MOISTURE, DRYING_HISTORY_SIZE
from core.models import HistorySample


START = datetime(2025, 8, 1, 6, 0, tzinfo=timezone.utc)


def steady_curve(n=DRYING_HISTORY_SIZE, step_minutes=10):
    """Linear moisture loss from 40% at 0.3 points per sample."""
    return [
        HistorySample(timestamp=START + timedelta(minutes=i * step_minutes), moisture=40.0 - 0.3 * i)
        for i in range(n)
    ]


def noisy_curve(n=DRYING_HISTORY_SIZE, step_minutes=10, seed=7):
    """Same trend with sensor jitter, which hurts the endpoint estimate most."""
    rng = np.random.default_rng(seed)
    noise = rng.normal(0.0, 0.8, size=n)
    return [
        HistorySample(timestamp=START + timedelta(minutes=i * step_minutes), moisture=float(40.0 - 0.3 * i + noise[i]))
        for i in range(n)
    ]


DATASETS = {
    "steady_drying": steady_curve(),
    "noisy_drying": noisy_curve(),
}


def benchmark(history, estimate_func, rounds=200):
    """
    Benchmark utility: average call time and the resulting estimate.
    Returns: (avg_time, estimate)
    """
    result = None
    t0 = time.perf_counter()
    for _ in range(rounds):
        result = estimate_func(history, DEFAULT_DRY_TARGET_MOISTURE)
    t1 = time.perf_counter()

    return (t1 - t0) / rounds, result


if __name__ == "__main__":
    results = []

    for label, history in DATASETS.items():
        # Benchmark V1 (window endpoints)
        v1_time, v1_estimate = benchmark(history, CompletionEstimator.estimate)

        # Benchmark V2 (least-squares slope)
        v2_time, v2_estimate = benchmark(history, CompletionEstimator.estimate_v2)

        results.append(
            {
                "label": label,
                "v1": {"time": v1_time, "estimate": v1_estimate},
                "v2": {"time": v2_time, "estimate": v2_estimate},
            }
        )

    # Print all results together
    for entry in results:
        label = entry["label"]
        v1 = entry["v1"]
        v2 = entry["v2"]
        time_delta_pct = ((v2["time"] - v1["time"]) / v1["time"]) * 100 if v1["time"] else 0.0

        print(f"\n=== Benchmark Results ({label}) ===")
        print("V1 (window endpoints):")
        print(f"  Avg call time  : {v1['time']:.6f} seconds")
        print(f"  Estimate       : {v1['estimate'].label if v1['estimate'] else 'n/a'}")
        print()

        print("V2 (least-squares slope):")
        print(f"  Avg call time  : {v2['time']:.6f} seconds ({time_delta_pct:+.2f}% vs V1)")
        print(f"  Estimate       : {v2['estimate'].label if v2['estimate'] else 'n/a'}")
        print()
