"""
MotorLogStore - the backing store seen by the query facade.

Groups the hierarchy and row queries behind one object so the facade can be
handed any store with the same methods (tests pass mocks).
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from ...series import SeriesIdentity, TelemetryFilters, TelemetryPoint
from .hierarchy import get_line_summaries, get_motor_names, get_production_weeks, get_zone_summaries
from .rows import get_last_timestamp, get_motor_rows, get_motor_rows_between, ping


class MotorLogStore:
    """
    Blocking peewee-backed store. Every method raises BackingStoreUnavailable
    when the database call fails.
    """

    def fetch_zones(self) -> List[Dict[str, Any]]:
        return get_zone_summaries()

    def fetch_lines(self, zone: str) -> List[Dict[str, Any]]:
        return get_line_summaries(zone)

    def fetch_motors(self, zone: str, line: str) -> List[str]:
        return get_motor_names(zone, line)

    def fetch_weeks(self) -> List[str]:
        return get_production_weeks()

    def fetch_rows(self, identity: SeriesIdentity, filters: Optional[TelemetryFilters] = None) -> List[TelemetryPoint]:
        return get_motor_rows(identity, filters)

    def fetch_rows_between(self, identity: SeriesIdentity, start: datetime, end: datetime) -> List[TelemetryPoint]:
        return get_motor_rows_between(identity, start, end)

    def fetch_last_timestamp(self, identity: SeriesIdentity) -> Optional[datetime]:
        return get_last_timestamp(identity)

    def ping(self) -> bool:
        return ping()
