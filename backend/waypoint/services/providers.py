"""Collaborator interfaces consumed by the optimizer and the monitor."""

from dataclasses import dataclass, field
from typing import Protocol

from waypoint.schemas.weather import GeoPoint, WeatherSnapshot


class ProviderError(Exception):
    """A routing, places or weather provider could not answer."""


@dataclass(frozen=True)
class RoutePlan:
    polyline: str | None
    duration_seconds: int
    distance_meters: int
    traffic_delay_seconds: int = 0


@dataclass(frozen=True)
class Candidate:
    """Lean place model mapped from a places search result."""
    id: str
    name: str
    location: GeoPoint
    rating: float | None
    review_count: int
    types: tuple[str, ...] = ()
    price_level: int | None = None
    attributes: frozenset[str] = field(default_factory=frozenset)
    detour_minutes: float | None = None

    @property
    def primary_type(self) -> str | None:
        return self.types[0] if self.types else None

    @property
    def is_outdoor_only(self) -> bool:
        return "outdoor_seating" in self.attributes and "indoor_seating" not in self.attributes


class RoutingProvider(Protocol):
    async def route(
        self, origin: GeoPoint, destination: GeoPoint, *, mode: str = "driving"
    ) -> RoutePlan: ...


class PlacesProvider(Protocol):
    async def search(
        self,
        location: GeoPoint,
        radius: int,
        type: str,
        *,
        keyword: str | None = None,
        min_rating: float = 0,
        min_reviews: int = 0,
    ) -> list[Candidate]: ...


class WeatherProvider(Protocol):
    async def get_current(self, location: GeoPoint) -> WeatherSnapshot: ...
