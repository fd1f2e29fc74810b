"""Pytest configuration and fixtures."""

import asyncio

import pytest

from waypoint.schemas.planner import (
    DisableCause,
    DisabledPackage,
    DisableKind,
    EfficiencyPackage,
    FoodiePackage,
    LegSummary,
    Packages,
    RouteSummary,
    ScenicPackage,
    ScenicRouteSummary,
    SelectedRestaurant,
)
from waypoint.schemas.weather import GeoPoint, WeatherSnapshot
from waypoint.services.providers import Candidate, ProviderError, RoutePlan
from waypoint.services.weather_scorer import score_weather

ORIGIN = GeoPoint(lat=32.08, lng=34.78)
DESTINATION = GeoPoint(lat=32.10, lng=34.85)


# ─── Fake collaborators ───


class FakeRouting:
    """Returns a fixed plan for every route and records each call."""

    def __init__(self, plan: RoutePlan | None = None, fail: bool = False, delay: float = 0.0):
        self.plan = plan or RoutePlan(polyline="fake_polyline", duration_seconds=1800, distance_meters=15000)
        self.fail = fail
        self.delay = delay
        self.calls: list[tuple[GeoPoint, GeoPoint]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def route(self, origin, destination, *, mode="driving"):
        self.calls.append((origin, destination))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.fail:
                raise ProviderError("Directions API: OVER_QUERY_LIMIT")
            return self.plan
        finally:
            self.in_flight -= 1


class FakePlaces:
    """Serves candidates by place type, applying the provider-side filters."""

    def __init__(
        self,
        by_type: dict[str, list[Candidate]] | None = None,
        fail_types: set[str] | None = None,
        apply_filters: bool = True,
    ):
        self.by_type = by_type or {}
        self.fail_types = fail_types or set()
        self.apply_filters = apply_filters
        self.calls: list[dict] = []

    async def search(self, location, radius, type, *, keyword=None, min_rating=0, min_reviews=0):
        self.calls.append({
            "location": location,
            "radius": radius,
            "type": type,
            "keyword": keyword,
            "min_rating": min_rating,
            "min_reviews": min_reviews,
        })
        if type in self.fail_types:
            raise ProviderError(f"Places API: REQUEST_DENIED for {type}")
        results = list(self.by_type.get(type, []))
        if self.apply_filters:
            results = [
                c for c in results
                if (c.rating or 0) >= min_rating and c.review_count >= min_reviews
            ]
        return results


class FakeWeather:
    def __init__(self, snapshot: WeatherSnapshot | None = None, fail: bool = False):
        self.snapshot = snapshot or WeatherSnapshot()
        self.fail = fail
        self.calls: list[GeoPoint] = []

    async def get_current(self, location):
        self.calls.append(location)
        if self.fail:
            raise ProviderError("Open-Meteo request failed: timeout")
        return self.snapshot


class FakeCache:
    """In-memory stand-in for CacheService."""

    def __init__(self):
        self.optimizations: dict[str, dict] = {}
        self.claimed: set[tuple] = set()

    @staticmethod
    def _key(origin, destination, user_prefs):
        return f"{origin}:{destination}:{user_prefs}"

    async def get_optimization(self, origin, destination, user_prefs):
        return self.optimizations.get(self._key(origin, destination, user_prefs))

    async def set_optimization(self, origin, destination, user_prefs, data):
        self.optimizations[self._key(origin, destination, user_prefs)] = data

    async def claim_intervention(self, trip_id, location, intervention_type, severity):
        key = (trip_id, location["lat"], location["lng"], intervention_type, severity)
        if key in self.claimed:
            return False
        self.claimed.add(key)
        return True


# ─── Factories ───


def make_candidate(id: str, rating: float | None = 4.5, reviews: int = 200, **kwargs) -> Candidate:
    defaults = {
        "name": f"Place {id}",
        "location": GeoPoint(lat=32.09, lng=34.80),
        "types": ("point_of_interest",),
    }
    defaults.update(kwargs)
    if "attributes" in defaults:
        defaults["attributes"] = frozenset(defaults["attributes"])
    return Candidate(id=id, rating=rating, review_count=reviews, **defaults)


def make_packages(disabled: tuple[str, ...] = ()) -> Packages:
    """Minimal enabled packages, with the named modes replaced by disabled ones."""
    location = GeoPoint(lat=32.09, lng=34.81)
    packages = {
        "efficiency": EfficiencyPackage(
            route=RouteSummary(polyline="p", duration_seconds=1800, distance_meters=15000),
            stops=[],
            total_duration_seconds=1800,
            hazard_alert=False,
            combined_score=0.8,
        ),
        "scenic": ScenicPackage(
            route=ScenicRouteSummary(polyline="p", duration_seconds=2160, distance_meters=17250, scenic_score=0.85),
            duration_increase="+20%",
            stops=[],
            weather_visibility=10,
            combined_score=0.8,
        ),
        "foodie": FoodiePackage(
            selected_restaurant=SelectedRestaurant(
                place_id="r1", name="Bistro", location=location, rating=4.8,
                user_ratings_total=1200, types=["restaurant"], price_level=2,
                score=150.0, why_selected=["Rating: 4.8/5"],
            ),
            alternatives=[],
            route_to_restaurant=LegSummary(duration_seconds=900, distance_meters=8000),
            route_from_restaurant=LegSummary(duration_seconds=1200, distance_meters=10000),
            outdoor_filtered=False,
            combined_score=0.8,
        ),
    }
    for mode in disabled:
        kind = DisableKind.RESTAURANT_SEARCH_FAILED if mode == "foodie" else DisableKind.ROUTE_FAILED
        packages[mode] = DisabledPackage.from_cause(mode, DisableCause(kind=kind))
    return Packages(**packages)


# ─── Fixtures ───


@pytest.fixture
def clear_weather() -> WeatherSnapshot:
    return WeatherSnapshot(precipitation_probability=5, visibility=10, temperature=22, wind_speed=8)


@pytest.fixture
def clear_scores(clear_weather):
    return score_weather(clear_weather)


@pytest.fixture
def routing() -> FakeRouting:
    return FakeRouting()


@pytest.fixture
def places() -> FakePlaces:
    return FakePlaces()


@pytest.fixture
def fake_cache() -> FakeCache:
    return FakeCache()
