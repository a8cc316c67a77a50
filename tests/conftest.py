"""Pytest configuration and shared fixtures"""
import os
import sys
from datetime import datetime, timedelta

import pytest
from peewee import SqliteDatabase

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from motorlog.models import MODELS, MotorLog
from motorlog.series import TelemetryPoint

BASE_TIME = datetime(2024, 3, 4, 8, 0, 0)  # a Monday


@pytest.fixture
def test_db(tmp_path):
    """File-backed test database (threadpool workers open their own connections)"""
    test_database = SqliteDatabase(str(tmp_path / "motorlog_test.db"))

    test_database.bind(MODELS, bind_refs=False, bind_backrefs=False)
    test_database.connect()
    test_database.create_tables(MODELS)

    yield test_database

    test_database.drop_tables(MODELS)
    test_database.close()


@pytest.fixture
def make_points():
    """Build TelemetryPoints from (seconds_offset, current, on) tuples"""
    def _make(samples, start=BASE_TIME, zone="Z1", line="L1", motor="M1", first_id=1):
        points = []
        for i, sample in enumerate(samples):
            offset, current, on = sample[:3]
            avg = sample[3] if len(sample) > 3 else current
            points.append(TelemetryPoint(
                id=first_id + i,
                timestamp=start + timedelta(seconds=offset),
                zone=zone,
                line=line,
                motor_name=motor,
                motor_current=current,
                is_motor_on=bool(on),
                max_current_limit=10.0,
                avg_current=avg,
                running_time=float(i),
                production_week="2024-W10",
            ))
        return points
    return _make


@pytest.fixture
def sample_logs(test_db):
    """
    Two zones of motor samples:
      Z1 / L1: M1, M2     Z1 / L2: M3     Z2 / L9: M9
    M1 gets 20 samples a minute apart across two production weeks
    """
    rows = []

    for i in range(20):
        rows.append({
            "timestamp": BASE_TIME + timedelta(minutes=i),
            "zone": "Z1", "line": "L1", "motor_name": "M1",
            "production_week": "2024-W10" if i < 10 else "2024-W11",
            "max_current_limit": 10.0,
            "motor_current": float(i % 7),
            "is_motor_on": (i // 5) % 2 == 1,
            "avg_current": float(i % 5),
            "running_time": float(i),
        })

    for zone, line, motor, week in [("Z1", "L1", "M2", "2024-W10"),
                                    ("Z1", "L2", "M3", "2024-W11"),
                                    ("Z2", "L9", "M9", "2024-W12")]:
        rows.append({
            "timestamp": BASE_TIME,
            "zone": zone, "line": line, "motor_name": motor,
            "production_week": week,
            "max_current_limit": 5.0,
            "motor_current": 1.0,
            "is_motor_on": True,
            "avg_current": 1.0,
            "running_time": 0.0,
        })

    # Outside the hierarchy: ignored by lookups
    rows.append({
        "timestamp": BASE_TIME,
        "zone": "Z3", "line": None, "motor_name": "MX",
        "production_week": None,
        "max_current_limit": None,
        "motor_current": 0.0,
        "is_motor_on": False,
        "avg_current": None,
        "running_time": None,
    })

    MotorLog.insert_many(rows).execute()
    return rows
