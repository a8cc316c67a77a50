#!/usr/bin/env python3
"""
motorlog Database Models (peewee)

One table of raw motor samples. The hierarchy (zone -> line -> motor) is not
a schema: it is whatever distinct values the samples carry.

Notes:
- Timestamps are naive local datetimes, stored by peewee as sortable text.
- The composite (zone, line, motor_name, timestamp) index serves both the
  hierarchy aggregates and the per-motor range scans.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from peewee import (
    Model, SqliteDatabase, BooleanField, CharField, DateTimeField, FloatField
)

from .series import TelemetryPoint

logger = logging.getLogger("motorlog.models")

# Global DB handle (initialized in DatabaseManager.connect)
database = SqliteDatabase(None)


class BaseModel(Model):
    class Meta:
        database = database
        legacy_table_names = False


class MotorLog(BaseModel):
    """One motor sample (id added implicitly by Peewee)."""
    timestamp = DateTimeField()
    zone = CharField(null=True)
    line = CharField(null=True)
    motor_name = CharField(null=True)
    production_week = CharField(null=True)
    max_current_limit = FloatField(null=True)
    motor_current = FloatField(null=True)
    is_motor_on = BooleanField(default=False)
    avg_current = FloatField(null=True)
    running_time = FloatField(null=True)  # minutes

    class Meta:
        table_name = "motor_logs"
        indexes = (
            (("zone", "line", "motor_name", "timestamp"), False),
            (("production_week",), False),
        )

    def to_point(self) -> TelemetryPoint:
        return TelemetryPoint(
            id=self.id,
            timestamp=self.timestamp,
            zone=self.zone,
            line=self.line,
            motor_name=self.motor_name,
            motor_current=self.motor_current,
            is_motor_on=bool(self.is_motor_on),
            max_current_limit=self.max_current_limit,
            avg_current=self.avg_current,
            running_time=self.running_time,
            production_week=self.production_week,
        )


MODELS = [MotorLog]


class DatabaseManager:
    """DB lifecycle + minimal convenience ops."""

    def __init__(self, db_path: str = "./motorlog.db") -> None:
        self.db_path = Path(db_path)
        self.connected = False

    def connect(self) -> bool:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            database.init(str(self.db_path))
            database.bind(MODELS, bind_refs=False, bind_backrefs=False)
            database.connect(reuse_if_open=True)

            # SQLite pragmas for reliability/perf
            database.execute_sql("PRAGMA journal_mode=WAL;")
            database.execute_sql("PRAGMA synchronous=NORMAL;")
            database.execute_sql("PRAGMA cache_size=10000;")
            database.execute_sql("PRAGMA temp_store=MEMORY;")

            database.create_tables(MODELS, safe=True)
            self.connected = True
            logger.info(f"database initialized: {self.db_path}")
            return True
        except Exception as e:
            logger.error(f"database init failed: {e}")
            return False

    def close(self) -> None:
        if self.connected:
            database.close()
            self.connected = False
            logger.info("database connection closed")

    def get_stats(self) -> Dict[str, Any]:
        try:
            return {
                "motor_logs_total": MotorLog.select().count(),
                "database_size_mb": round(self.db_path.stat().st_size / 1024 / 1024, 2)
                if self.db_path.exists() else 0,
            }
        except Exception as e:
            logger.error(f"get_stats failed: {e}")
            return {}
