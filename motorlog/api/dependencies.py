#!/usr/bin/env python3
"""
motorlog API Dependencies - Dependency Injection and Error Translation
"""

import logging
import math
from datetime import timedelta
from typing import List, Optional

from fastapi import HTTPException, Request, status

from ..core.errors import BackingStoreUnavailable, InvalidArgument
from .facade import QueryFacade

logger = logging.getLogger("motorlog.server")


def get_facade(request: Request) -> QueryFacade:
    """The per-process QueryFacade built by create_app."""
    return request.app.state.facade


def to_http_error(e: Exception) -> HTTPException:
    """Map core errors onto HTTP status codes."""
    if isinstance(e, InvalidArgument):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if isinstance(e, BackingStoreUnavailable):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    logger.error(f"Unexpected error: {e}", exc_info=True)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


def parse_weeks(weeks: Optional[str]) -> List[str]:
    """'2024-W01, 2024-W02' -> ['2024-W01', '2024-W02']"""
    if not weeks:
        return []
    return [w.strip() for w in weeks.split(",") if w.strip()]


def parse_days(day: Optional[str]) -> List[int]:
    """'ALL' or empty -> []; '1,3' -> [1, 3] (Monday=1 .. Sunday=7)."""
    if not day or day.strip().upper() == "ALL":
        return []
    days = []
    for part in day.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            days.append(int(part))
        except ValueError:
            raise InvalidArgument(f"day must be ALL or weekday numbers 1-7, got {part!r}") from None
    return days


def clamp_limit(limit: Optional[int], default: int, lower: int, upper: int) -> int:
    """Requested point budget, bounded to [lower, upper]. Non-positive values are rejected."""
    if limit is None:
        limit = default
    elif limit < 1:
        raise InvalidArgument(f"limit must be >= 1, got {limit}")
    return max(lower, min(limit, upper))


def parse_minutes(minutes: Optional[float]) -> Optional[timedelta]:
    """Window length in minutes; None keeps the configured live window."""
    if minutes is None:
        return None
    if not math.isfinite(minutes):
        raise InvalidArgument(f"minutes must be a finite number, got {minutes}")
    try:
        return timedelta(minutes=minutes)
    except OverflowError:
        raise InvalidArgument(f"minutes out of range, got {minutes}") from None
