"""Tests for package aggregation across the three modes."""

from datetime import datetime

import pytest

from tests.conftest import (
    DESTINATION,
    ORIGIN,
    FakePlaces,
    FakeRouting,
    FakeWeather,
    make_candidate,
)
from waypoint.schemas.weather import WeatherSnapshot
from waypoint.services.providers import ProviderError
from waypoint.services.route_optimizer import RouteOptimizer

NIGHT = datetime(2026, 5, 4, 3, 0)


@pytest.fixture
def trip_places():
    return FakePlaces(by_type={
        "cafe": [make_candidate("cafe1", rating=4.5, reviews=400, types=("cafe",))],
        "park": [make_candidate("park1", rating=4.7, reviews=2500, types=("park",), attributes={"view"})],
        "restaurant": [
            make_candidate("rest1", rating=4.7, reviews=900, types=("restaurant",)),
            make_candidate("rest2", rating=4.5, reviews=300, types=("restaurant",)),
        ],
    })


class TestGeneratePackages:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_clear_day_all_modes_enabled(self, trip_places, clear_weather):
        weather = FakeWeather(clear_weather)
        optimizer = RouteOptimizer(FakeRouting(), trip_places, weather)

        result = await optimizer.generate_packages(ORIGIN, DESTINATION, now=NIGHT)

        assert result.ok is True
        assert [pkg.disabled for _, pkg in result.packages.items()] == [False, False, False]
        assert result.disabled_modes == []
        assert result.weather_insights.scores.overall == pytest.approx(1.0)
        assert result.weather_insights.alerts == []
        assert result.recommended == "scenic"
        assert result.recommendation_reason == "Excellent visibility (10km) and low precipitation"
        assert result.metadata.request_id.startswith("opt_")
        assert result.metadata.processing_time_ms >= 0
        assert weather.calls == [DESTINATION]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fog_disables_scenic(self, trip_places):
        weather = FakeWeather(WeatherSnapshot(visibility=3, precipitation_probability=50, temperature=22, wind_speed=8))
        optimizer = RouteOptimizer(FakeRouting(), trip_places, weather)

        result = await optimizer.generate_packages(ORIGIN, DESTINATION, now=NIGHT)

        assert result.packages.scenic.disabled is True
        assert result.packages.scenic.fallback_mode == "efficiency"
        assert [(d.mode, d.icon) for d in result.disabled_modes] == [("scenic", "fog")]
        assert result.disabled_modes[0].reason == "Foggy view: visibility 3km < 5km minimum"
        assert result.recommended == "efficiency"
        assert [a.type for a in result.weather_insights.alerts] == ["visibility"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_optimizer_crash_becomes_disabled_package(self, trip_places, clear_weather):
        optimizer = RouteOptimizer(FakeRouting(), trip_places, FakeWeather(clear_weather))

        async def crash(*args, **kwargs):
            raise RuntimeError("unexpected")

        optimizer.optimizers["foodie"].optimize = crash

        result = await optimizer.generate_packages(ORIGIN, DESTINATION, now=NIGHT)

        assert result.packages.foodie.disabled is True
        assert result.packages.foodie.reason == "Restaurant search failed"
        assert result.packages.efficiency.disabled is False
        assert [d.mode for d in result.disabled_modes] == ["foodie"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_routing_outage_disables_every_mode(self, trip_places, clear_weather):
        optimizer = RouteOptimizer(FakeRouting(fail=True), trip_places, FakeWeather(clear_weather))

        result = await optimizer.generate_packages(ORIGIN, DESTINATION, now=NIGHT)

        assert [d.mode for d in result.disabled_modes] == ["efficiency", "scenic", "foodie"]
        assert result.recommendation_reason == "No travel mode is available right now"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_weather_failure_propagates(self, trip_places):
        optimizer = RouteOptimizer(FakeRouting(), trip_places, FakeWeather(fail=True))

        with pytest.raises(ProviderError):
            await optimizer.generate_packages(ORIGIN, DESTINATION)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_modes_run_concurrently(self, trip_places, clear_weather):
        routing = FakeRouting(delay=0.05)
        optimizer = RouteOptimizer(routing, trip_places, FakeWeather(clear_weather))

        await optimizer.generate_packages(ORIGIN, DESTINATION, now=NIGHT)

        assert routing.max_in_flight >= 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_result_serializes(self, trip_places, clear_weather):
        optimizer = RouteOptimizer(FakeRouting(), trip_places, FakeWeather(clear_weather))

        result = await optimizer.generate_packages(ORIGIN, DESTINATION, now=NIGHT)
        data = result.model_dump(mode="json")

        assert data["packages"]["foodie"]["selected_restaurant"]["place_id"] == "rest1"
        assert data["packages"]["scenic"]["duration_increase"] == "+20%"
        assert isinstance(data["metadata"]["generated_at"], str)
