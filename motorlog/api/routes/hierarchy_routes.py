#!/usr/bin/env python3
"""
Hierarchy Routes - Zones, Lines, Motors and Production Weeks

All four are served through the metadata cache.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..dependencies import get_facade, to_http_error
from ..facade import QueryFacade
from ..schemas import LineSummary, ZoneSummary

logger = logging.getLogger("motorlog.server")


def create_hierarchy_routes() -> APIRouter:
    """Create hierarchy lookup routes."""
    router = APIRouter()

    @router.get("/api/zones", response_model=List[ZoneSummary])
    async def list_zones(facade: QueryFacade = Depends(get_facade)):
        """All zones with line and motor counts."""
        try:
            return await facade.get_zones()
        except Exception as e:
            raise to_http_error(e) from e

    @router.get("/api/lines", response_model=List[LineSummary])
    async def list_lines(
        zone: Optional[str] = Query(None),
        facade: QueryFacade = Depends(get_facade),
    ):
        """Lines of a zone with motor counts."""
        try:
            return await facade.get_lines(zone)
        except Exception as e:
            raise to_http_error(e) from e

    @router.get("/api/motors", response_model=List[str])
    async def list_motors(
        zone: Optional[str] = Query(None),
        line: Optional[str] = Query(None),
        facade: QueryFacade = Depends(get_facade),
    ):
        """Motor names of a zone/line."""
        try:
            return await facade.get_motors(zone, line)
        except Exception as e:
            raise to_http_error(e) from e

    @router.get("/api/weeks", response_model=List[str])
    async def list_weeks(facade: QueryFacade = Depends(get_facade)):
        """Distinct production weeks present in the data."""
        try:
            return await facade.get_weeks()
        except Exception as e:
            raise to_http_error(e) from e

    return router
