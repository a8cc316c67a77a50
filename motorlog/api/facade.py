"""
Query Facade

Composes the metadata cache, the backing store and the series functions into
the operations the HTTP layer calls.

- Hierarchy requests (zones, lines, motors, weeks) go through the cache.
- Telemetry requests are recomputed from the store on every call.

All store work is blocking (peewee) and runs in the threadpool so a slow
query never stalls the event loop or other cache keys.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from fastapi.concurrency import run_in_threadpool

from ..cache import MetadataCache
from ..core.config import ServerConfig
from ..core.errors import InvalidArgument
from ..series import SeriesIdentity, TelemetryFilters, TelemetryPoint
from .queries import (
    DataAge, RunSummary, WindowAnchor, classify_data_age, reduce_series,
    resolve_anchor, select_window, summarize, validate_budget, validate_window,
    window_bounds,
)

logger = logging.getLogger("motorlog.server")


@dataclass
class CacheTTLs:
    """Seconds each hierarchy level stays fresh."""
    zones: float = 60.0
    lines: float = 30.0
    motors: float = 30.0
    weeks: float = 300.0

    @classmethod
    def from_config(cls, config: ServerConfig) -> "CacheTTLs":
        return cls(
            zones=config.zones_ttl_seconds,
            lines=config.lines_ttl_seconds,
            motors=config.motors_ttl_seconds,
            weeks=config.weeks_ttl_seconds,
        )


@dataclass
class SeriesResult:
    identity: SeriesIdentity
    points: List[TelemetryPoint]
    total_count: int
    target_budget: int
    data_age: Optional[DataAge] = None

    @property
    def downsampled(self) -> bool:
        return self.total_count > self.target_budget


@dataclass
class WindowResult:
    identity: SeriesIdentity
    points: List[TelemetryPoint]
    anchor: WindowAnchor
    window: timedelta
    window_start: Optional[datetime] = None
    window_end: Optional[datetime] = None
    data_age: Optional[DataAge] = None


@dataclass
class SummaryResult:
    identity: SeriesIdentity
    summary: RunSummary = field(default_factory=RunSummary)
    data_age: Optional[DataAge] = None


def cache_key(kind: str, *parts: str) -> str:
    """Unambiguous key for free-form zone/line names."""
    if not parts:
        return kind
    return f"{kind}:{json.dumps(list(parts), ensure_ascii=False)}"


def _required(value: Optional[str]) -> str:
    return (value or "").strip()


def _checked(identity: SeriesIdentity) -> SeriesIdentity:
    if not isinstance(identity, SeriesIdentity):
        raise InvalidArgument(f"expected a SeriesIdentity, got {type(identity).__name__}")
    return SeriesIdentity.parse(identity.zone, identity.line, identity.motor_name)


class QueryFacade:
    """
    Entry point for the API layer.

    The app factory builds one instance per process and routes receive it
    through a dependency; nothing here is a module-level singleton.
    """

    def __init__(
        self,
        store: Any,
        cache: MetadataCache,
        ttls: Optional[CacheTTLs] = None,
        clock: Callable[[], datetime] = datetime.now,
        default_point_limit: int = 5000,
        ranking_metric: str = "motor_current",
        live_window: timedelta = timedelta(minutes=15),
    ):
        self.store = store
        self.cache = cache
        self.ttls = ttls or CacheTTLs()
        self.clock = clock
        self.default_point_limit = validate_budget(default_point_limit)
        self.ranking_metric = ranking_metric
        self.live_window = validate_window(live_window)

    @classmethod
    def from_config(cls, config: ServerConfig, store: Any, cache: MetadataCache, **kwargs) -> "QueryFacade":
        return cls(
            store=store,
            cache=cache,
            ttls=CacheTTLs.from_config(config),
            default_point_limit=config.default_point_limit,
            ranking_metric=config.ranking_metric,
            live_window=timedelta(minutes=config.live_window_minutes),
            **kwargs,
        )

    # ---- hierarchy (cached) ----

    async def get_zones(self) -> List[Dict[str, Any]]:
        return await self.cache.get(
            cache_key("zones"), self.ttls.zones,
            lambda: run_in_threadpool(self.store.fetch_zones),
        )

    async def get_lines(self, zone: Optional[str]) -> List[Dict[str, Any]]:
        zone = _required(zone)
        if not zone:
            raise InvalidArgument("zone is required")
        return await self.cache.get(
            cache_key("lines", zone), self.ttls.lines,
            lambda: run_in_threadpool(self.store.fetch_lines, zone),
        )

    async def get_motors(self, zone: Optional[str], line: Optional[str]) -> List[str]:
        zone, line = _required(zone), _required(line)
        if not zone or not line:
            raise InvalidArgument("zone and line are required")
        return await self.cache.get(
            cache_key("motors", zone, line), self.ttls.motors,
            lambda: run_in_threadpool(self.store.fetch_motors, zone, line),
        )

    async def get_weeks(self) -> List[str]:
        return await self.cache.get(
            cache_key("weeks"), self.ttls.weeks,
            lambda: run_in_threadpool(self.store.fetch_weeks),
        )

    # ---- telemetry (never cached) ----

    async def get_series(
        self,
        identity: SeriesIdentity,
        filters: Optional[TelemetryFilters] = None,
        target_budget: Optional[int] = None,
    ) -> SeriesResult:
        """Downsampled historical series of one motor."""
        identity = _checked(identity)
        budget = self.default_point_limit if target_budget is None else validate_budget(target_budget)

        rows = await run_in_threadpool(self.store.fetch_rows, identity, filters)
        points = await run_in_threadpool(reduce_series, rows, budget, self.ranking_metric)

        logger.debug(f"series {identity}: {len(rows)} rows -> {len(points)} points")
        return SeriesResult(
            identity=identity,
            points=points,
            total_count=len(rows),
            target_budget=budget,
            data_age=classify_data_age(points[-1].timestamp if points else None, self.clock()),
        )

    async def get_latest(
        self,
        identity: SeriesIdentity,
        window: Optional[timedelta] = None,
        anchor: Any = WindowAnchor.WALL_CLOCK,
    ) -> WindowResult:
        """
        Trailing window of one motor.

        Args:
            identity: Zone, line and motor name
            window: Window length, defaults to the configured live window
            anchor: "wall_clock" ends the window now; "last_sample" ends it at
                    the newest stored sample of this motor

        Returns:
            WindowResult; points is empty when nothing falls inside the window
        """
        identity = _checked(identity)
        window = self.live_window if window is None else validate_window(window)
        try:
            anchor = WindowAnchor(anchor)
        except ValueError:
            raise InvalidArgument(f"anchor must be one of {[a.value for a in WindowAnchor]}, got {anchor!r}") from None

        now = self.clock()
        # Reject windows that cannot be laid out before touching the store
        window_bounds(now, window)
        last_sample = None
        if anchor == WindowAnchor.LAST_SAMPLE:
            last_sample = await run_in_threadpool(self.store.fetch_last_timestamp, identity)

        end = resolve_anchor(anchor, now, last_sample)
        if end is None:
            return WindowResult(identity=identity, points=[], anchor=anchor, window=window)

        start, end = window_bounds(end, window)
        rows = await run_in_threadpool(self.store.fetch_rows_between, identity, start, end)
        points = select_window(rows, end, window)

        return WindowResult(
            identity=identity,
            points=points,
            anchor=anchor,
            window=window,
            window_start=start,
            window_end=end,
            data_age=classify_data_age(points[-1].timestamp if points else last_sample, now),
        )

    async def get_summary(self, identity: SeriesIdentity, filters: Optional[TelemetryFilters] = None) -> SummaryResult:
        """Run analytics over every matching raw sample (not the downsampled view)."""
        identity = _checked(identity)
        rows = await run_in_threadpool(self.store.fetch_rows, identity, filters)
        summary = summarize(rows)
        return SummaryResult(
            identity=identity,
            summary=summary,
            data_age=classify_data_age(summary.last_timestamp, self.clock()),
        )
