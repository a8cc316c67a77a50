#!/usr/bin/env python3
"""
motorlog API Schemas - Pydantic Models for Responses
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from ..series import TelemetryPoint


class ZoneSummary(BaseModel):
    name: str
    line_count: int
    motor_count: int
    status: str = "Healthy"


class LineSummary(BaseModel):
    name: str
    zone: str
    motor_count: int


class MotorLogRecord(BaseModel):
    id: int
    timestamp: datetime
    zone: str
    line: str
    motor_name: str
    production_week: Optional[str] = None
    max_current_limit: Optional[float] = None
    motor_current: Optional[float] = None
    is_motor_on: int  # 0/1 for step charts
    avg_current: Optional[float] = None
    running_time: Optional[float] = None

    @classmethod
    def from_point(cls, point: TelemetryPoint) -> "MotorLogRecord":
        return cls(
            id=point.id,
            timestamp=point.timestamp,
            zone=point.zone,
            line=point.line,
            motor_name=point.motor_name,
            production_week=point.production_week,
            max_current_limit=point.max_current_limit,
            motor_current=point.motor_current,
            is_motor_on=int(bool(point.is_motor_on)),
            avg_current=point.avg_current,
            running_time=point.running_time,
        )


class DataAgeInfo(BaseModel):
    label: str  # fresh | recent | stale | old
    minutes_ago: int


class SeriesResponse(BaseModel):
    zone: str
    line: str
    motor: str
    points: List[MotorLogRecord]
    count: int
    total_count: int
    target_points: int
    downsampled: bool
    data_age: Optional[DataAgeInfo] = None


class LatestResponse(BaseModel):
    zone: str
    line: str
    motor: str
    points: List[MotorLogRecord]
    count: int
    anchor: str
    minutes: float
    window_start: Optional[datetime] = None
    window_end: Optional[datetime] = None
    data_age: Optional[DataAgeInfo] = None


class RunSummaryInfo(BaseModel):
    sample_count: int
    on_samples: int
    peak_current: float
    cycles: int
    limit_breaches: int
    first_timestamp: Optional[datetime] = None
    last_timestamp: Optional[datetime] = None


class SummaryResponse(BaseModel):
    zone: str
    line: str
    motor: str
    summary: RunSummaryInfo
    data_age: Optional[DataAgeInfo] = None
