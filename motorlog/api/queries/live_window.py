"""
Trailing time-window selection for auto-refreshing views.

The window is anchored either to the wall clock or to the last stored sample.
The two differ whenever data delivery lags behind real time, so callers pick
the anchor explicitly.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional

from ...core.errors import InvalidArgument
from ...series import TelemetryPoint, sort_points


class WindowAnchor(str, Enum):
    WALL_CLOCK = "wall_clock"
    LAST_SAMPLE = "last_sample"


def validate_window(window: timedelta) -> timedelta:
    if not isinstance(window, timedelta):
        raise InvalidArgument(f"window must be a timedelta, got {type(window).__name__}")
    if window < timedelta(0):
        raise InvalidArgument(f"window must not be negative, got {window}")
    return window


def window_bounds(now: datetime, window: timedelta) -> tuple:
    """Inclusive (start, end) of the trailing window ending at now."""
    validate_window(window)
    try:
        return now - window, now
    except OverflowError:
        raise InvalidArgument(f"window of {window} reaches before the earliest representable time") from None


def select_window(points: Iterable[TelemetryPoint], now: datetime, window: timedelta) -> List[TelemetryPoint]:
    """Points with now - window <= timestamp <= now, ascending. No bucketing."""
    start, end = window_bounds(now, window)
    return sort_points(p for p in points if start <= p.timestamp <= end)


def resolve_anchor(anchor: WindowAnchor, wall_now: datetime, last_sample: Optional[datetime]) -> Optional[datetime]:
    """Instant the window ends at. None when anchored to a series with no samples."""
    if anchor == WindowAnchor.WALL_CLOCK:
        return wall_now
    return last_sample
