#!/usr/bin/env python3
"""
motorlog Series Model

One series is always scoped to exactly one (zone, line, motor_name) identity.
Points are ordered by timestamp ascending before any processing.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Iterable, List, Optional

from .core.errors import InvalidArgument


@dataclass(frozen=True)
class SeriesIdentity:
    """Hierarchy key of one motor."""
    zone: str
    line: str
    motor_name: str

    @classmethod
    def parse(cls, zone: Optional[str], line: Optional[str], motor_name: Optional[str]) -> "SeriesIdentity":
        """Build an identity, rejecting missing or blank parts."""
        parts = [(p or "").strip() for p in (zone, line, motor_name)]
        if not all(parts):
            raise InvalidArgument("zone, line, motor are required")
        return cls(*parts)


@dataclass(frozen=True)
class TelemetryFilters:
    """Optional category filters applied by the backing store.

    weeks: production week labels, empty means all weeks
    days: ISO weekdays (Monday=1 .. Sunday=7), empty means all days
    """
    weeks: FrozenSet[str] = field(default_factory=frozenset)
    days: FrozenSet[int] = field(default_factory=frozenset)

    def __post_init__(self):
        bad = [d for d in self.days if not isinstance(d, int) or not 1 <= d <= 7]
        if bad:
            raise InvalidArgument(f"day must be between 1 (Monday) and 7 (Sunday), got {sorted(bad)}")

    @classmethod
    def build(cls, weeks: Iterable[str] = (), days: Iterable[int] = ()) -> "TelemetryFilters":
        return cls(
            weeks=frozenset(w.strip() for w in weeks if w and w.strip()),
            days=frozenset(days),
        )


@dataclass
class TelemetryPoint:
    """Motor telemetry sample.

    motor_current is the instantaneous signal, is_motor_on the binary run state.
    The remaining numeric fields are carried through untouched.
    """
    id: int
    timestamp: datetime
    zone: str
    line: str
    motor_name: str
    motor_current: float
    is_motor_on: bool
    max_current_limit: Optional[float] = None
    avg_current: Optional[float] = None
    running_time: Optional[float] = None
    production_week: Optional[str] = None


def sort_points(points: Iterable[TelemetryPoint]) -> List[TelemetryPoint]:
    """Stable ascending sort by timestamp (input order kept for equal timestamps)."""
    return sorted(points, key=lambda p: p.timestamp)
