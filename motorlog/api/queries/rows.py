"""
Raw motor sample retrieval.

Pure data retrieval for one motor identity: no downsampling happens here.
"""

from datetime import datetime
from typing import List, Optional

from peewee import fn

from ...models import MotorLog
from ...series import SeriesIdentity, TelemetryFilters, TelemetryPoint
from .utils import iso_to_sqlite_weekdays, store_call


def _identity_query(identity: SeriesIdentity):
    return MotorLog.select().where(
        (MotorLog.zone == identity.zone) &
        (MotorLog.line == identity.line) &
        (MotorLog.motor_name == identity.motor_name)
    )


@store_call
def get_motor_rows(identity: SeriesIdentity, filters: Optional[TelemetryFilters] = None) -> List[TelemetryPoint]:
    """
    Get every sample of one motor matching the category filters.

    Args:
        identity: Zone, line and motor name
        filters: Production weeks and ISO weekdays; empty sets match everything

    Returns:
        Points ordered by timestamp ascending
    """
    query = _identity_query(identity)

    if filters is not None:
        if filters.weeks:
            query = query.where(MotorLog.production_week.in_(sorted(filters.weeks)))
        if filters.days:
            weekday = fn.strftime("%w", MotorLog.timestamp)
            query = query.where(weekday.in_(iso_to_sqlite_weekdays(filters.days)))

    query = query.order_by(MotorLog.timestamp, MotorLog.id)
    return [row.to_point() for row in query]


@store_call
def get_motor_rows_between(identity: SeriesIdentity, start: datetime, end: datetime) -> List[TelemetryPoint]:
    """Samples of one motor with start <= timestamp <= end, ascending."""
    query = (_identity_query(identity)
             .where((MotorLog.timestamp >= start) & (MotorLog.timestamp <= end))
             .order_by(MotorLog.timestamp, MotorLog.id))
    return [row.to_point() for row in query]


@store_call
def get_last_timestamp(identity: SeriesIdentity) -> Optional[datetime]:
    """Newest sample timestamp of one motor, or None when it has no samples."""
    latest = (_identity_query(identity)
              .order_by(MotorLog.timestamp.desc())
              .first())
    return latest.timestamp if latest else None


@store_call
def ping() -> bool:
    MotorLog.select().limit(1).execute()
    return True
