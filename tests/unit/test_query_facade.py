"""Unit tests for the query facade (store mocked out)"""
import asyncio
from datetime import timedelta
from unittest.mock import Mock

import pytest

from motorlog.cache import MetadataCache
from motorlog.core.config import ServerConfig
from motorlog.core.errors import InvalidArgument
from motorlog.series import SeriesIdentity, TelemetryFilters
from motorlog.api.facade import CacheTTLs, QueryFacade, cache_key
from motorlog.api.queries import WindowAnchor

from conftest import BASE_TIME

M1 = SeriesIdentity("Z1", "L1", "M1")
NOW = BASE_TIME + timedelta(minutes=20)


@pytest.fixture
def store():
    mock = Mock()
    mock.fetch_zones.return_value = [{"name": "Z1", "line_count": 1, "motor_count": 1, "status": "Healthy"}]
    mock.fetch_lines.return_value = [{"name": "L1", "zone": "Z1", "motor_count": 1}]
    mock.fetch_motors.return_value = ["M1"]
    mock.fetch_weeks.return_value = ["2024-W10"]
    mock.fetch_rows.return_value = []
    mock.fetch_rows_between.return_value = []
    mock.fetch_last_timestamp.return_value = None
    return mock


@pytest.fixture
def facade(store):
    return QueryFacade(store, MetadataCache(), clock=lambda: NOW)


class TestCacheKeys:

    def test_plain_kind(self):
        assert cache_key("zones") == "zones"

    def test_separator_in_names_does_not_collide(self):
        assert cache_key("motors", "a:b", "c") != cache_key("motors", "a", "b:c")


class TestHierarchy:

    def test_zones_are_cached(self, facade, store):
        async def scenario():
            first = await facade.get_zones()
            second = await facade.get_zones()
            return first, second

        first, second = asyncio.run(scenario())

        assert first == second
        store.fetch_zones.assert_called_once_with()

    def test_lines_are_cached_per_zone(self, facade, store):
        async def scenario():
            await facade.get_lines("Z1")
            await facade.get_lines("Z1")
            await facade.get_lines("Z2")

        asyncio.run(scenario())
        assert store.fetch_lines.call_count == 2

    def test_motors_pass_zone_and_line(self, facade, store):
        assert asyncio.run(facade.get_motors(" Z1 ", "L1")) == ["M1"]
        store.fetch_motors.assert_called_once_with("Z1", "L1")

    def test_weeks(self, facade, store):
        assert asyncio.run(facade.get_weeks()) == ["2024-W10"]

    @pytest.mark.parametrize("zone", [None, "", "   "])
    def test_lines_require_zone(self, facade, store, zone):
        with pytest.raises(InvalidArgument, match="zone is required"):
            asyncio.run(facade.get_lines(zone))
        store.fetch_lines.assert_not_called()

    @pytest.mark.parametrize("zone, line", [("Z1", None), (None, "L1"), ("", "")])
    def test_motors_require_zone_and_line(self, facade, store, zone, line):
        with pytest.raises(InvalidArgument, match="zone and line are required"):
            asyncio.run(facade.get_motors(zone, line))
        store.fetch_motors.assert_not_called()

    def test_hierarchy_ttls_come_from_config(self, store):
        config = ServerConfig(zones_ttl_seconds=5, lines_ttl_seconds=6, motors_ttl_seconds=7, weeks_ttl_seconds=8)
        facade = QueryFacade.from_config(config, store, MetadataCache())
        assert facade.ttls == CacheTTLs(zones=5, lines=6, motors=7, weeks=8)


class TestSeries:

    def test_small_series_is_returned_whole(self, facade, store, make_points):
        store.fetch_rows.return_value = make_points([(60 * i, float(i), i % 2) for i in range(10)])

        result = asyncio.run(facade.get_series(M1))

        assert len(result.points) == 10
        assert result.total_count == 10
        assert result.target_budget == 5000
        assert result.downsampled is False

    def test_large_series_is_downsampled(self, facade, store, make_points):
        store.fetch_rows.return_value = make_points([(i, 5.0, 1) for i in range(100)])

        result = asyncio.run(facade.get_series(M1, target_budget=30))

        assert len(result.points) == 10
        assert result.total_count == 100
        assert result.downsampled is True

    def test_filters_are_passed_to_store(self, facade, store):
        filters = TelemetryFilters.build(weeks=["2024-W10"], days=[1])
        asyncio.run(facade.get_series(M1, filters))
        store.fetch_rows.assert_called_once_with(M1, filters)

    def test_data_age_uses_newest_point(self, facade, store, make_points):
        store.fetch_rows.return_value = make_points([(0, 1.0, 1), (60, 1.0, 1)])

        result = asyncio.run(facade.get_series(M1))

        assert result.data_age.label == "recent"
        assert result.data_age.minutes_ago == 19

    def test_empty_series_has_no_age(self, facade):
        result = asyncio.run(facade.get_series(M1))
        assert result.points == []
        assert result.data_age is None

    def test_invalid_budget_is_rejected_before_store_call(self, facade, store):
        with pytest.raises(InvalidArgument):
            asyncio.run(facade.get_series(M1, target_budget=0))
        store.fetch_rows.assert_not_called()

    def test_identity_must_be_complete(self, facade, store):
        with pytest.raises(InvalidArgument):
            asyncio.run(facade.get_series(SeriesIdentity("Z1", "", "M1")))
        with pytest.raises(InvalidArgument):
            asyncio.run(facade.get_series(("Z1", "L1", "M1")))
        store.fetch_rows.assert_not_called()

    def test_telemetry_is_never_cached(self, facade, store):
        async def scenario():
            await facade.get_series(M1)
            await facade.get_series(M1)

        asyncio.run(scenario())
        assert store.fetch_rows.call_count == 2


class TestLatest:

    def test_wall_clock_window_ends_now(self, facade, store, make_points):
        store.fetch_rows_between.return_value = make_points([(60 * i, 1.0, 1) for i in range(4, 21)])

        result = asyncio.run(facade.get_latest(M1))

        store.fetch_rows_between.assert_called_once_with(M1, NOW - timedelta(minutes=15), NOW)
        assert result.anchor == WindowAnchor.WALL_CLOCK
        assert result.window_end == NOW
        # minute 4 is outside the trailing 15 minutes
        assert len(result.points) == 16
        store.fetch_last_timestamp.assert_not_called()

    def test_last_sample_window_ends_at_newest_sample(self, facade, store):
        last = BASE_TIME + timedelta(minutes=10)
        store.fetch_last_timestamp.return_value = last

        result = asyncio.run(facade.get_latest(M1, timedelta(minutes=5), anchor="last_sample"))

        store.fetch_rows_between.assert_called_once_with(M1, last - timedelta(minutes=5), last)
        assert result.anchor == WindowAnchor.LAST_SAMPLE
        assert result.window_start == last - timedelta(minutes=5)
        assert result.data_age.minutes_ago == 10

    def test_last_sample_without_samples_is_empty(self, facade, store):
        result = asyncio.run(facade.get_latest(M1, anchor=WindowAnchor.LAST_SAMPLE))

        assert result.points == []
        assert result.window_end is None
        store.fetch_rows_between.assert_not_called()

    def test_lagging_data_gives_empty_wall_clock_window(self, facade, store):
        result = asyncio.run(facade.get_latest(M1))
        assert result.points == []
        assert result.window_end == NOW

    def test_unknown_anchor_is_rejected(self, facade, store):
        with pytest.raises(InvalidArgument, match="anchor"):
            asyncio.run(facade.get_latest(M1, anchor="midnight"))
        store.fetch_rows_between.assert_not_called()

    def test_negative_window_is_rejected(self, facade):
        with pytest.raises(InvalidArgument):
            asyncio.run(facade.get_latest(M1, timedelta(minutes=-5)))


class TestSummary:

    def test_summary_over_raw_rows(self, facade, store, make_points):
        store.fetch_rows.return_value = make_points([(0, 1.0, 0), (60, 11.0, 1), (120, 2.0, 0), (180, 3.0, 1)])

        result = asyncio.run(facade.get_summary(M1))

        assert result.summary.sample_count == 4
        assert result.summary.cycles == 2
        assert result.summary.limit_breaches == 1
        assert result.data_age.minutes_ago == 17


class TestWindowRange:
    """Windows reaching before datetime.min are rejected up front"""

    @pytest.mark.parametrize("anchor", ["wall_clock", "last_sample"])
    def test_huge_window_is_rejected_before_store_call(self, facade, store, anchor):
        with pytest.raises(InvalidArgument):
            asyncio.run(facade.get_latest(M1, timedelta(days=900_000), anchor=anchor))

        store.fetch_last_timestamp.assert_not_called()
        store.fetch_rows_between.assert_not_called()
