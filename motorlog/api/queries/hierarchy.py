"""
Hierarchy lookups: zones, lines, motors and production weeks.

These aggregate over every stored sample, which is why the query facade
serves them through the metadata cache.
"""

from typing import Any, Dict, List

from peewee import fn

from ...models import MotorLog
from .utils import store_call

# Samples missing any hierarchy part are not part of the hierarchy
_IN_HIERARCHY = (
    MotorLog.zone.is_null(False)
    & MotorLog.line.is_null(False)
    & MotorLog.motor_name.is_null(False)
)


@store_call
def get_zone_summaries() -> List[Dict[str, Any]]:
    """Zones with their line and motor counts, ordered by name."""
    query = (MotorLog
             .select(MotorLog.zone,
                     fn.COUNT(fn.DISTINCT(MotorLog.line)).alias("line_count"),
                     fn.COUNT(fn.DISTINCT(MotorLog.motor_name)).alias("motor_count"))
             .where(_IN_HIERARCHY)
             .group_by(MotorLog.zone)
             .order_by(MotorLog.zone)
             .dicts())

    return [
        {
            "name": row["zone"],
            "line_count": row["line_count"],
            "motor_count": row["motor_count"],
            "status": "Healthy",
        }
        for row in query
    ]


@store_call
def get_line_summaries(zone: str) -> List[Dict[str, Any]]:
    """Lines of one zone with their motor counts, ordered by name."""
    query = (MotorLog
             .select(MotorLog.line,
                     fn.COUNT(fn.DISTINCT(MotorLog.motor_name)).alias("motor_count"))
             .where(_IN_HIERARCHY & (MotorLog.zone == zone))
             .group_by(MotorLog.line)
             .order_by(MotorLog.line)
             .dicts())

    return [
        {"name": row["line"], "zone": zone, "motor_count": row["motor_count"]}
        for row in query
    ]


@store_call
def get_motor_names(zone: str, line: str) -> List[str]:
    query = (MotorLog
             .select(MotorLog.motor_name)
             .where(_IN_HIERARCHY & (MotorLog.zone == zone) & (MotorLog.line == line))
             .distinct()
             .order_by(MotorLog.motor_name)
             .tuples())
    return [name for (name,) in query]


@store_call
def get_production_weeks() -> List[str]:
    query = (MotorLog
             .select(MotorLog.production_week)
             .where(MotorLog.production_week.is_null(False))
             .distinct()
             .order_by(MotorLog.production_week)
             .tuples())
    return [week for (week,) in query]
