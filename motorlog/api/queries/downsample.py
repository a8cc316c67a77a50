"""
Adaptive downsampling for motor telemetry.

Reduces a raw series to a bounded set of real points while keeping what an
operator needs to see on a chart:
- first point of every time bucket (even coverage over flat stretches)
- peak and valley of the ranking metric in every bucket (current spikes)
- every on/off state transition, wherever it falls

Transitions are never dropped, so the output may exceed the target budget.
"""

import logging
from datetime import timedelta
from typing import Iterable, List

import numpy as np
import pandas as pd

from ...core.errors import InvalidArgument
from ...series import TelemetryPoint, sort_points

logger = logging.getLogger("motorlog.queries")

RANKING_METRICS = ("motor_current", "avg_current")
POINTS_PER_BUCKET = 3  # first, peak, valley

_ONE_MICROSECOND = timedelta(microseconds=1)


def validate_budget(target_budget: int) -> int:
    """Reject budgets that are not positive integers."""
    if isinstance(target_budget, bool) or not isinstance(target_budget, (int, np.integer)):
        raise InvalidArgument(f"target budget must be an integer, got {target_budget!r}")
    if target_budget < 1:
        raise InvalidArgument(f"target budget must be >= 1, got {target_budget}")
    return int(target_budget)


def bucket_count_for(target_budget: int) -> int:
    return max(1, validate_budget(target_budget) // POINTS_PER_BUCKET)


def assign_buckets(points: List[TelemetryPoint], bucket_count: int) -> np.ndarray:
    """
    Bucket index per point by proportional time position.

    Args:
        points: Series sorted by timestamp ascending
        bucket_count: Number of buckets (>= 1)

    Returns:
        int64 array, values in [0, bucket_count)
    """
    start = points[0].timestamp
    offsets = np.array([(p.timestamp - start) // _ONE_MICROSECOND for p in points], dtype=np.int64)
    span = int(offsets.max()) if len(offsets) else 0

    # All points coincide in time
    if span <= 0:
        return np.zeros(len(points), dtype=np.int64)

    width = span / bucket_count
    buckets = np.floor(offsets / width).astype(np.int64)
    return np.minimum(buckets, bucket_count - 1)


def transition_positions(points: List[TelemetryPoint]) -> np.ndarray:
    """Positions whose on/off state differs from the preceding point."""
    if len(points) < 2:
        return np.array([], dtype=np.int64)
    state = np.array([bool(p.is_motor_on) for p in points])
    return np.flatnonzero(state[1:] != state[:-1]) + 1


def bucket_representatives(points: List[TelemetryPoint], buckets: np.ndarray, ranking_metric: str) -> np.ndarray:
    """First, peak and valley positions of every non-empty bucket.

    Ties go to the earliest position. Points without a ranking value only
    compete for the "first" slot.
    """
    frame = pd.DataFrame({
        "bucket": buckets,
        "metric": pd.to_numeric(
            pd.Series([getattr(p, ranking_metric) for p in points], dtype="object"),
            errors="coerce",
        ),
    })

    # Frame is already in chronological order, so the first row per bucket wins
    firsts = frame.drop_duplicates("bucket", keep="first").index

    ranked = frame.dropna(subset=["metric"])
    if ranked.empty:
        return np.asarray(firsts, dtype=np.int64)

    grouped = ranked.groupby("bucket")["metric"]
    peaks = grouped.idxmax()
    valleys = grouped.idxmin()

    return np.union1d(
        np.asarray(firsts, dtype=np.int64),
        np.union1d(peaks.to_numpy(dtype=np.int64), valleys.to_numpy(dtype=np.int64)),
    )


def reduce_series(
    points: Iterable[TelemetryPoint],
    target_budget: int,
    ranking_metric: str = "motor_current",
) -> List[TelemetryPoint]:
    """
    Reduce a series to a representative subset of its own points.

    Args:
        points: Raw points of one series, any order
        target_budget: Nominal maximum output size (>= 1)
        ranking_metric: Field used for peak/valley selection
                        ("motor_current" or "avg_current")

    Returns:
        Selected points sorted by timestamp, unique by id. Series at or under
        the budget come back whole.
    """
    target_budget = validate_budget(target_budget)
    if ranking_metric not in RANKING_METRICS:
        raise InvalidArgument(f"ranking metric must be one of {RANKING_METRICS}, got {ranking_metric!r}")

    ordered = sort_points(points)
    if len(ordered) <= target_budget:
        return ordered

    bucket_count = bucket_count_for(target_budget)
    buckets = assign_buckets(ordered, bucket_count)

    selected = np.union1d(
        bucket_representatives(ordered, buckets, ranking_metric),
        transition_positions(ordered),
    )

    # Positions are sorted, so this keeps the earliest point for any repeated id
    result = []
    seen_ids = set()
    for pos in selected:
        point = ordered[int(pos)]
        if point.id in seen_ids:
            continue
        seen_ids.add(point.id)
        result.append(point)

    logger.debug(
        f"Downsampled {len(ordered)} points to {len(result)} "
        f"(budget={target_budget}, buckets={bucket_count}, metric={ranking_metric})"
    )
    return result
