"""Google Maps client — Directions + Places adapter with mock fallback."""

import hashlib
import logging
import math
import random

import httpx

from waypoint.config import settings
from waypoint.schemas.weather import GeoPoint
from waypoint.services.geo import haversine_km
from waypoint.services.providers import Candidate, ProviderError, RoutePlan

logger = logging.getLogger(__name__)

PLACES_OK_STATUSES = {"OK", "ZERO_RESULTS"}

# Mock data: names per place type
MOCK_NAMES = {
    "cafe": ["Corner Cafe", "Roastery", "Espresso Bar", "Morning Beans", "Harbor Coffee"],
    "restaurant": ["Bistro", "Trattoria", "Grill House", "Kitchen & Bar", "Brasserie", "Market Table"],
    "gas_station": ["Fuel Stop", "Express Gas", "Highway Station"],
    "park": ["Riverside Park", "Hilltop Gardens", "Promenade Park", "Botanical Garden"],
    "tourist_attraction": ["Old Lighthouse", "Sunset Lookout", "Cliff Walk", "Heritage Square"],
    "natural_feature": ["Sand Dunes", "Crater Rim", "Waterfall Trail"],
    "point_of_interest": ["Observation Deck", "Harbor Pier", "City Overlook"],
    "museum": ["Museum of Art", "Science Center", "History Museum", "Design Museum"],
}
MOCK_ROAD_FACTOR = 1.3
MOCK_SPEED_KMH = 40.0


class GoogleMapsClient:
    """Adapter for Google Directions and Places Nearby Search."""

    def __init__(self):
        self._client: httpx.AsyncClient | None = None
        self._use_mock = not settings.google_maps_api_key

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=settings.google_maps_base_url,
                timeout=settings.provider_timeout_seconds,
            )
        return self._client

    async def _get_json(self, path: str, params: dict) -> dict:
        client = await self._get_client()
        try:
            resp = await client.get(path, params={**params, "key": settings.google_maps_api_key})
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as e:
            raise ProviderError(f"Google Maps request to {path} failed: {e}") from e

    async def route(
        self, origin: GeoPoint, destination: GeoPoint, *, mode: str = "driving"
    ) -> RoutePlan:
        """Fastest route between two points."""
        if self._use_mock:
            return self._generate_mock_route(origin, destination)

        data = await self._get_json(
            "/directions/json",
            {
                "origin": f"{origin.lat},{origin.lng}",
                "destination": f"{destination.lat},{destination.lng}",
                "mode": mode,
                "departure_time": "now",
                "language": settings.maps_language,
            },
        )
        if data.get("status") != "OK" or not data.get("routes"):
            raise ProviderError(f"Directions API: {data.get('status')}")

        route = data["routes"][0]
        leg = route["legs"][0]
        duration = leg.get("duration", {}).get("value", 0)
        in_traffic = leg.get("duration_in_traffic", {}).get("value")

        return RoutePlan(
            polyline=route.get("overview_polyline", {}).get("points"),
            duration_seconds=duration,
            distance_meters=leg.get("distance", {}).get("value", 0),
            traffic_delay_seconds=max(0, in_traffic - duration) if in_traffic is not None else 0,
        )

    async def search(
        self,
        location: GeoPoint,
        radius: int,
        type: str,
        *,
        keyword: str | None = None,
        min_rating: float = 0,
        min_reviews: int = 0,
    ) -> list[Candidate]:
        """Nearby search, filtered by minimum rating and review count."""
        if self._use_mock:
            places = self._generate_mock_places(location, radius, type, keyword)
        else:
            params = {
                "location": f"{location.lat},{location.lng}",
                "radius": str(radius),
                "type": type,
                "language": settings.maps_language,
            }
            if keyword:
                params["keyword"] = keyword
            data = await self._get_json("/place/nearbysearch/json", params)
            if data.get("status") not in PLACES_OK_STATUSES:
                raise ProviderError(f"Places API: {data.get('status')}")
            places = [self._to_candidate(p) for p in data.get("results", [])]

        return [
            p for p in places
            if (p.rating or 0) >= min_rating and p.review_count >= min_reviews
        ]

    @staticmethod
    def _to_candidate(p: dict) -> Candidate:
        geo = p.get("geometry", {}).get("location", {})
        # outdoorSeating/indoorSeating are Places API (New) fields. Legacy Nearby
        # Search never returns them, so live legacy results carry no seating
        # attributes and the foodie rain filter keeps every restaurant.
        attributes = set()
        if p.get("outdoorSeating"):
            attributes.add("outdoor_seating")
        if p.get("indoorSeating"):
            attributes.add("indoor_seating")
        return Candidate(
            id=p["place_id"],
            name=p.get("name", "Unknown place"),
            location=GeoPoint(lat=geo.get("lat", 0.0), lng=geo.get("lng", 0.0)),
            rating=p.get("rating"),
            review_count=p.get("user_ratings_total") or 0,
            types=tuple(p.get("types", [])),
            price_level=p.get("price_level"),
            attributes=frozenset(attributes),
        )

    # ─── Mock data ───

    @staticmethod
    def _rng(*parts) -> random.Random:
        seed_str = ":".join(str(p) for p in parts)
        return random.Random(int(hashlib.md5(seed_str.encode()).hexdigest()[:8], 16))

    def _generate_mock_route(self, origin: GeoPoint, destination: GeoPoint) -> RoutePlan:
        rng = self._rng(origin.lat, origin.lng, destination.lat, destination.lng)
        road_km = max(haversine_km(origin, destination) * MOCK_ROAD_FACTOR, 0.5)
        return RoutePlan(
            polyline="mock_polyline",
            duration_seconds=int(road_km / MOCK_SPEED_KMH * 3600),
            distance_meters=int(road_km * 1000),
            traffic_delay_seconds=rng.choice([0, 0, 60, 180, 300]),
        )

    def _generate_mock_places(
        self, location: GeoPoint, radius: int, type: str, keyword: str | None
    ) -> list[Candidate]:
        rng = self._rng(round(location.lat, 4), round(location.lng, 4), radius, type, keyword)
        names = MOCK_NAMES.get(type, ["Local Spot", "Town Landmark", "Hidden Gem"])
        places = []
        for i, name in enumerate(names):
            # Uniform point inside the search circle
            dist_km = radius / 1000 * math.sqrt(rng.random())
            bearing = rng.uniform(0, 2 * math.pi)
            lat = location.lat + (dist_km / 111.0) * math.cos(bearing)
            lng = location.lng + (dist_km / (111.0 * max(math.cos(math.radians(location.lat)), 0.01))) * math.sin(bearing)

            attributes = set()
            if type in ("park", "tourist_attraction", "natural_feature", "point_of_interest") and rng.random() < 0.6:
                attributes.add("view")
            if type in ("restaurant", "cafe"):
                if rng.random() < 0.5:
                    attributes.add("outdoor_seating")
                if rng.random() < 0.85:
                    attributes.add("indoor_seating")

            places.append(Candidate(
                id=f"mock_{type}_{i}_{rng.randint(1000, 9999)}",
                name=name,
                location=GeoPoint(lat=max(-90.0, min(90.0, lat)), lng=max(-180.0, min(180.0, lng))),
                rating=round(rng.uniform(3.8, 4.9), 1),
                review_count=rng.randint(20, 3000),
                types=(type, "point_of_interest", "establishment"),
                price_level=rng.randint(1, 4) if type in ("restaurant", "cafe") else None,
                attributes=frozenset(attributes),
            ))
        return places

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None


google_maps_client = GoogleMapsClient()
