#!/usr/bin/env python3
"""
motorlog Server Configuration Management

Load order:
1. Defaults declared on ServerConfig
2. YAML file (if it exists)
3. MOTORLOG_<FIELD> environment variables (a .env file is honoured)
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

from ..api.queries.downsample import RANKING_METRICS

logger = logging.getLogger("motorlog.server")

ENV_PREFIX = "MOTORLOG_"


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 4000
    log_level: str = "INFO"
    db_path: str = "./motorlog.db"
    # Metadata cache TTLs, independent per hierarchy level
    zones_ttl_seconds: float = Field(60.0, gt=0)
    lines_ttl_seconds: float = Field(30.0, gt=0)
    motors_ttl_seconds: float = Field(30.0, gt=0)
    weeks_ttl_seconds: float = Field(300.0, gt=0)
    # Downsampling
    default_point_limit: int = Field(5000, ge=1)
    min_point_limit: int = Field(100, ge=1)
    max_point_limit: int = Field(20000, ge=1)
    ranking_metric: str = "motor_current"
    # Trailing window for auto-refresh consumers
    live_window_minutes: int = Field(15, ge=0)

    @field_validator("ranking_metric")
    @classmethod
    def _known_metric(cls, value: str) -> str:
        if value not in RANKING_METRICS:
            raise ValueError(f"ranking_metric must be one of {RANKING_METRICS}, got {value!r}")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @model_validator(mode="after")
    def _ordered_limits(self) -> "ServerConfig":
        if self.min_point_limit > self.max_point_limit:
            raise ValueError(
                f"min_point_limit ({self.min_point_limit}) must not exceed max_point_limit ({self.max_point_limit})"
            )
        return self


def _env_overrides() -> Dict[str, Any]:
    """Collect MOTORLOG_<FIELD> variables for known config fields."""
    overrides = {}
    for name in ServerConfig.model_fields:
        raw = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None:
            overrides[name] = raw
    return overrides


def load_config_from(path: Optional[str] = None) -> ServerConfig:
    """Load server configuration from YAML file, then apply environment overrides."""
    load_dotenv()

    data: Dict[str, Any] = {}
    if path and Path(path).exists():
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        logger.info(f"Loaded configuration from: {path}")
    elif path:
        logger.info(f"Config file {path} not found, using defaults")

    data.update(_env_overrides())
    return ServerConfig(**data)
