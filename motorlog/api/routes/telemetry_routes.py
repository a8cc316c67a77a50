#!/usr/bin/env python3
"""
Telemetry Routes - Downsampled History, Live Window and Run Summary

Never cached: every request reads the store again.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from ...core.config import ServerConfig
from ...series import SeriesIdentity, TelemetryFilters
from ..dependencies import clamp_limit, get_facade, parse_days, parse_minutes, parse_weeks, to_http_error
from ..facade import QueryFacade
from ..schemas import (
    DataAgeInfo, LatestResponse, MotorLogRecord, RunSummaryInfo, SeriesResponse, SummaryResponse
)

logger = logging.getLogger("motorlog.server")


def _data_age(age) -> Optional[DataAgeInfo]:
    if age is None:
        return None
    return DataAgeInfo(label=age.label, minutes_ago=age.minutes_ago)


def create_telemetry_routes() -> APIRouter:
    """Create motor telemetry routes."""
    router = APIRouter()

    @router.get("/api/motor-logs", response_model=SeriesResponse)
    async def get_motor_logs(
        request: Request,
        zone: Optional[str] = Query(None),
        line: Optional[str] = Query(None),
        motor: Optional[str] = Query(None),
        weeks: str = Query(""),       # comma separated production weeks, empty = all
        day: str = Query("ALL"),      # ALL or comma separated ISO weekdays (Monday=1)
        limit: Optional[int] = Query(None),
        facade: QueryFacade = Depends(get_facade),
    ):
        """
        Downsampled history of one motor.
        Buckets keep first/peak/valley points; every on/off transition is kept.
        """
        config: ServerConfig = request.app.state.config
        try:
            identity = SeriesIdentity.parse(zone, line, motor)
            filters = TelemetryFilters.build(weeks=parse_weeks(weeks), days=parse_days(day))
            target = clamp_limit(limit, config.default_point_limit,
                                 config.min_point_limit, config.max_point_limit)

            result = await facade.get_series(identity, filters, target)
        except Exception as e:
            raise to_http_error(e) from e

        return SeriesResponse(
            zone=identity.zone,
            line=identity.line,
            motor=identity.motor_name,
            points=[MotorLogRecord.from_point(p) for p in result.points],
            count=len(result.points),
            total_count=result.total_count,
            target_points=result.target_budget,
            downsampled=result.downsampled,
            data_age=_data_age(result.data_age),
        )

    @router.get("/api/motor-logs-latest", response_model=LatestResponse)
    async def get_motor_logs_latest(
        zone: Optional[str] = Query(None),
        line: Optional[str] = Query(None),
        motor: Optional[str] = Query(None),
        minutes: Optional[float] = Query(None),
        anchor: str = Query("wall_clock", pattern="^(wall_clock|last_sample)$"),
        facade: QueryFacade = Depends(get_facade),
    ):
        """Trailing window of one motor for auto-refresh mode."""
        try:
            identity = SeriesIdentity.parse(zone, line, motor)
            window = parse_minutes(minutes)

            result = await facade.get_latest(identity, window, anchor)
        except Exception as e:
            raise to_http_error(e) from e

        return LatestResponse(
            zone=identity.zone,
            line=identity.line,
            motor=identity.motor_name,
            points=[MotorLogRecord.from_point(p) for p in result.points],
            count=len(result.points),
            anchor=result.anchor.value,
            minutes=result.window.total_seconds() / 60,
            window_start=result.window_start,
            window_end=result.window_end,
            data_age=_data_age(result.data_age),
        )

    @router.get("/api/motor-logs/summary", response_model=SummaryResponse)
    async def get_motor_summary(
        zone: Optional[str] = Query(None),
        line: Optional[str] = Query(None),
        motor: Optional[str] = Query(None),
        weeks: str = Query(""),
        day: str = Query("ALL"),
        facade: QueryFacade = Depends(get_facade),
    ):
        """Run samples, peak current, cycles and limit breaches over the raw data."""
        try:
            identity = SeriesIdentity.parse(zone, line, motor)
            filters = TelemetryFilters.build(weeks=parse_weeks(weeks), days=parse_days(day))

            result = await facade.get_summary(identity, filters)
        except Exception as e:
            raise to_http_error(e) from e

        return SummaryResponse(
            zone=identity.zone,
            line=identity.line,
            motor=identity.motor_name,
            summary=RunSummaryInfo(**result.summary.to_dict()),
            data_age=_data_age(result.data_age),
        )

    return router
