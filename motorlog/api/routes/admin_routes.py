#!/usr/bin/env python3
"""
Admin Routes - Health Checks and Cache Statistics
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from ..dependencies import get_facade
from ..facade import QueryFacade

logger = logging.getLogger("motorlog.server")


def create_admin_routes() -> APIRouter:
    """Create health and stats routes."""
    router = APIRouter()

    @router.get("/health")
    @router.get("/api/health")
    async def health(facade: QueryFacade = Depends(get_facade)):
        """Health check endpoint: store reachability plus cache counters."""
        try:
            await run_in_threadpool(facade.store.ping)
            db_ok = True
        except Exception as e:
            logger.warning(f"Health check: store unavailable: {e}")
            db_ok = False
        return {
            "status": "ok" if db_ok else "error",
            "db": "connected" if db_ok else "down",
            "cache": facade.cache.stats(),
        }

    @router.get("/api/stats")
    def get_stats(request: Request):
        """Database statistics."""
        return request.app.state.db_manager.get_stats()

    return router
