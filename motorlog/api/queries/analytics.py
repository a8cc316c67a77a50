"""
Run analytics over a motor series.

Summary figures shown next to the charts (run samples, peak current, cycles,
limit breaches) and the freshness label of the newest sample.
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from ...series import TelemetryPoint, sort_points

# Data age thresholds in minutes: [fresh, recent, stale]; anything older is "old"
DATA_AGE_THRESHOLDS = [15, 60, 24 * 60]


@dataclass
class RunSummary:
    sample_count: int = 0
    on_samples: int = 0
    peak_current: float = 0.0
    cycles: int = 0
    limit_breaches: int = 0
    first_timestamp: Optional[datetime] = None
    last_timestamp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DataAge:
    label: str
    minutes_ago: int


def summarize(points: Iterable[TelemetryPoint]) -> RunSummary:
    """
    Summarize a series.

    cycles counts OFF -> ON transitions; a series that starts ON does not count
    its first sample as a cycle. limit_breaches counts samples whose current
    exceeds their own max_current_limit.
    """
    ordered = sort_points(points)
    if not ordered:
        return RunSummary()

    summary = RunSummary(
        sample_count=len(ordered),
        first_timestamp=ordered[0].timestamp,
        last_timestamp=ordered[-1].timestamp,
    )
    peak = None
    previous_on = None

    for point in ordered:
        on = bool(point.is_motor_on)
        if on:
            summary.on_samples += 1
        if previous_on is not None and on and not previous_on:
            summary.cycles += 1
        previous_on = on

        if point.motor_current is not None:
            if peak is None or point.motor_current > peak:
                peak = point.motor_current
            if point.max_current_limit is not None and point.motor_current > point.max_current_limit:
                summary.limit_breaches += 1

    summary.peak_current = round(float(peak), 2) if peak is not None else 0.0
    return summary


def classify_data_age(last_timestamp: Optional[datetime], now: datetime) -> Optional[DataAge]:
    """Label how old the newest sample is: fresh, recent, stale or old."""
    if last_timestamp is None:
        return None

    minutes = max(0, int((now - last_timestamp).total_seconds() // 60))
    fresh, recent, stale = DATA_AGE_THRESHOLDS
    if minutes < fresh:
        label = "fresh"
    elif minutes < recent:
        label = "recent"
    elif minutes < stale:
        label = "stale"
    else:
        label = "old"
    return DataAge(label=label, minutes_ago=minutes)
