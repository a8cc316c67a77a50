#!/usr/bin/env python3
"""
motorlog FastAPI application factory

Builds exactly one MetadataCache and one QueryFacade per app and hangs them
on app.state; routes reach them through api.dependencies.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..api.facade import QueryFacade
from ..api.queries.store import MotorLogStore
from ..api.routes.admin_routes import create_admin_routes
from ..api.routes.hierarchy_routes import create_hierarchy_routes
from ..api.routes.telemetry_routes import create_telemetry_routes
from ..cache import MetadataCache
from ..models import DatabaseManager
from .config import ServerConfig

logger = logging.getLogger("motorlog.server")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def create_app(
    config: ServerConfig,
    store: Optional[Any] = None,
    cache: Optional[MetadataCache] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    """
    Create the FastAPI app.

    Args:
        config: Server configuration
        store: Backing store, defaults to the peewee MotorLogStore
        cache: Metadata cache, defaults to a fresh empty one
        clock: Wall clock for live windows and data age, defaults to datetime.now
    """
    logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO), format=LOG_FORMAT)

    db_manager = DatabaseManager(config.db_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not db_manager.connect():
            raise RuntimeError(f"cannot open database at {config.db_path}")
        logger.info(f"motorlog {__version__} ready (db={config.db_path})")
        try:
            yield
        finally:
            db_manager.close()

    app = FastAPI(title="motorlog", version=__version__, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    facade_kwargs = {"clock": clock} if clock is not None else {}
    app.state.config = config
    app.state.db_manager = db_manager
    app.state.facade = QueryFacade.from_config(
        config,
        store=store if store is not None else MotorLogStore(),
        cache=cache if cache is not None else MetadataCache(),
        **facade_kwargs,
    )

    app.include_router(create_hierarchy_routes())
    app.include_router(create_telemetry_routes())
    app.include_router(create_admin_routes())
    return app
