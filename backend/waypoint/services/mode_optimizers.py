"""Mode optimizers — one strategy per travel mode (efficiency, scenic, foodie).

Each optimizer owns its provider round-trips and never raises: a provider
failure turns into a DisabledPackage carrying the cause.
"""

import asyncio
import logging

from waypoint.schemas.planner import (
    DisableCause,
    DisabledPackage,
    DisableKind,
    EfficiencyPackage,
    FoodiePackage,
    LegSummary,
    RestaurantAlternative,
    RouteSummary,
    ScenicPackage,
    ScenicRouteSummary,
    SelectedRestaurant,
    Stop,
)
from waypoint.schemas.weather import GeoPoint, WeatherScores, WeatherSnapshot
from waypoint.services.geo import midpoint
from waypoint.services.poi_scoring import (
    combined_score,
    detour_minutes,
    efficiency_score,
    foodie_score,
    scenic_score,
)
from waypoint.services.providers import Candidate, PlacesProvider, RoutingProvider

logger = logging.getLogger(__name__)


async def search_types(
    places: PlacesProvider,
    location: GeoPoint,
    radius: int,
    types: list[str],
    keyword: str | None = None,
    min_rating: float = 0,
) -> list[Candidate]:
    """Run one places search per type in parallel and merge by place id."""
    results = await asyncio.gather(*[
        places.search(location, radius, t, keyword=keyword, min_rating=min_rating)
        for t in types
    ])
    seen = set()
    merged = []
    for batch in results:
        for candidate in batch:
            if candidate.id not in seen:
                seen.add(candidate.id)
                merged.append(candidate)
    return merged


def _stop(candidate: Candidate, score: float, **extra) -> Stop:
    return Stop(
        place_id=candidate.id,
        name=candidate.name,
        location=candidate.location,
        rating=candidate.rating,
        user_ratings_total=candidate.review_count,
        types=list(candidate.types),
        attributes=sorted(candidate.attributes),
        score=round(score, 1),
        **extra,
    )


class EfficiencyOptimizer:
    """Fastest route plus up to three quick, highly rated stops near the start."""

    STOP_SEARCH_RADIUS_M = 500
    STOP_TYPES = ["cafe", "restaurant", "gas_station"]
    MIN_RATING = 4.0
    MAX_DETOUR_MINUTES = 5
    MAX_STOPS = 3
    SECONDS_PER_STOP = 300
    HAZARD_THRESHOLD = 0.4

    def __init__(self, routing: RoutingProvider, places: PlacesProvider):
        self.routing = routing
        self.places = places

    async def optimize(
        self,
        origin: GeoPoint,
        destination: GeoPoint,
        weather: WeatherSnapshot,
        weather_scores: WeatherScores,
    ) -> EfficiencyPackage | DisabledPackage:
        try:
            route = await self.routing.route(origin, destination)
            candidates = await search_types(
                self.places, origin, self.STOP_SEARCH_RADIUS_M, self.STOP_TYPES,
                min_rating=self.MIN_RATING,
            )
        except Exception as e:
            logger.error(f"Efficiency mode failed: {e}")
            return DisabledPackage.from_cause("efficiency", DisableCause(kind=DisableKind.ROUTE_FAILED))

        scored = [
            (c, efficiency_score(c)) for c in candidates
            if detour_minutes(c) <= self.MAX_DETOUR_MINUTES
        ]
        scored = [(c, s) for c, s in scored if s > 0]
        scored.sort(key=lambda cs: cs[1], reverse=True)
        top = scored[:self.MAX_STOPS]

        return EfficiencyPackage(
            route=RouteSummary(
                polyline=route.polyline,
                duration_seconds=route.duration_seconds,
                distance_meters=route.distance_meters,
                traffic_delay_seconds=route.traffic_delay_seconds,
            ),
            stops=[_stop(c, s, detour_minutes=detour_minutes(c)) for c, s in top],
            total_duration_seconds=route.duration_seconds + self.SECONDS_PER_STOP * len(top),
            hazard_alert=weather_scores.overall < self.HAZARD_THRESHOLD,
            combined_score=combined_score(
                "efficiency", route.duration_seconds, [s for _, s in top], weather_scores.overall
            ),
        )


class ScenicOptimizer:
    """Weather-gated scenic plan through viewpoints and parks near the midpoint."""

    MIN_VISIBILITY_KM = 5
    MAX_PRECIPITATION_PCT = 30
    # Heuristic knobs: a scenic detour takes 20% longer and covers 15% more road.
    DURATION_MULTIPLIER = 1.2
    DISTANCE_MULTIPLIER = 1.15
    SCENIC_ROUTE_SCORE = 0.85
    POI_SEARCH_RADIUS_M = 2000
    POI_TYPES = ["park", "tourist_attraction", "natural_feature", "point_of_interest"]
    POI_KEYWORD = "scenic view nature"
    MAX_STOPS = 5

    def __init__(self, routing: RoutingProvider, places: PlacesProvider):
        self.routing = routing
        self.places = places

    def gate(self, weather: WeatherSnapshot) -> DisabledPackage | None:
        """Return a disabled package when the view is not worth the detour."""
        if weather.visibility < self.MIN_VISIBILITY_KM:
            cause = DisableCause.low_visibility(weather.visibility)
        elif weather.precipitation_probability > self.MAX_PRECIPITATION_PCT:
            cause = DisableCause.high_rain_chance(weather.precipitation_probability)
        else:
            return None
        return DisabledPackage.from_cause("scenic", cause, fallback_mode="efficiency")

    async def optimize(
        self,
        origin: GeoPoint,
        destination: GeoPoint,
        weather: WeatherSnapshot,
        weather_scores: WeatherScores,
    ) -> ScenicPackage | DisabledPackage:
        gated = self.gate(weather)
        if gated is not None:
            return gated

        try:
            baseline = await self.routing.route(origin, destination)
            candidates = await search_types(
                self.places, midpoint(origin, destination), self.POI_SEARCH_RADIUS_M,
                self.POI_TYPES, keyword=self.POI_KEYWORD,
            )
        except Exception as e:
            logger.error(f"Scenic mode failed: {e}")
            return DisabledPackage.from_cause("scenic", DisableCause(kind=DisableKind.ROUTE_FAILED))

        scored = sorted(
            ((c, scenic_score(c, weather.visibility)) for c in candidates),
            key=lambda cs: cs[1],
            reverse=True,
        )
        top = scored[:self.MAX_STOPS]

        duration = round(baseline.duration_seconds * self.DURATION_MULTIPLIER)
        increase_pct = round((self.DURATION_MULTIPLIER - 1) * 100)

        return ScenicPackage(
            route=ScenicRouteSummary(
                polyline=baseline.polyline,
                duration_seconds=duration,
                distance_meters=round(baseline.distance_meters * self.DISTANCE_MULTIPLIER),
                scenic_score=self.SCENIC_ROUTE_SCORE,
            ),
            duration_increase=f"+{increase_pct}%",
            stops=[_stop(c, s) for c, s in top],
            weather_visibility=weather.visibility,
            combined_score=combined_score(
                "scenic", baseline.duration_seconds, [s for _, s in top], weather_scores.overall
            ),
        )


class FoodieOptimizer:
    """Food-first plan: pick the best restaurant, then route through it."""

    SEARCH_RADIUS_M = 10_000
    SEARCH_MIN_RATING = 4.4
    SEARCH_MIN_REVIEWS = 100
    STRICT_MIN_RATING = 4.6
    STRICT_MIN_REVIEWS = 500
    OUTDOOR_RAIN_THRESHOLD_PCT = 20
    MAX_ALTERNATIVES = 3
    DEFAULT_PRICE_LEVEL = 2

    def __init__(self, routing: RoutingProvider, places: PlacesProvider):
        self.routing = routing
        self.places = places

    def qualify(self, restaurants: list[Candidate]) -> list[Candidate]:
        """Strict bar first; relax to the search minimum only when nothing passes."""
        strict = [
            r for r in restaurants
            if (r.rating or 0) >= self.STRICT_MIN_RATING and r.review_count >= self.STRICT_MIN_REVIEWS
        ]
        if strict:
            return strict
        return [
            r for r in restaurants
            if (r.rating or 0) >= self.SEARCH_MIN_RATING and r.review_count >= self.SEARCH_MIN_REVIEWS
        ]

    async def optimize(
        self,
        origin: GeoPoint,
        destination: GeoPoint,
        weather: WeatherSnapshot,
        weather_scores: WeatherScores,
    ) -> FoodiePackage | DisabledPackage:
        try:
            restaurants = await self.places.search(
                midpoint(origin, destination),
                self.SEARCH_RADIUS_M,
                "restaurant",
                min_rating=self.SEARCH_MIN_RATING,
                min_reviews=self.SEARCH_MIN_REVIEWS,
            )

            rain_expected = weather.precipitation_probability > self.OUTDOOR_RAIN_THRESHOLD_PCT
            if rain_expected:
                restaurants = [r for r in restaurants if not r.is_outdoor_only]

            qualified = self.qualify(restaurants)
            if not qualified:
                return DisabledPackage.from_cause(
                    "foodie", DisableCause(kind=DisableKind.NO_QUALIFYING_RESTAURANT)
                )

            scored = sorted(
                ((r, foodie_score(r)) for r in qualified),
                key=lambda rs: rs[1],
                reverse=True,
            )
            selected, selected_score = scored[0]

            # Routes only after the restaurant is chosen
            to_food, from_food = await asyncio.gather(
                self.routing.route(origin, selected.location),
                self.routing.route(selected.location, destination),
            )
        except Exception as e:
            logger.error(f"Foodie mode failed: {e}")
            return DisabledPackage.from_cause(
                "foodie", DisableCause(kind=DisableKind.RESTAURANT_SEARCH_FAILED)
            )

        return FoodiePackage(
            selected_restaurant=SelectedRestaurant(
                place_id=selected.id,
                name=selected.name,
                location=selected.location,
                rating=selected.rating,
                user_ratings_total=selected.review_count,
                types=list(selected.types) or ["restaurant"],
                price_level=selected.price_level if selected.price_level is not None else self.DEFAULT_PRICE_LEVEL,
                score=round(selected_score, 1),
                why_selected=[
                    f"Rating: {selected.rating:g}/5",
                    f"Reviews: {selected.review_count:,}",
                    f"Cuisine: {(selected.primary_type or 'restaurant').replace('_', ' ').title()}",
                ],
            ),
            alternatives=[
                RestaurantAlternative(name=r.name, rating=r.rating, score=round(s, 1))
                for r, s in scored[1:1 + self.MAX_ALTERNATIVES]
            ],
            route_to_restaurant=LegSummary(
                duration_seconds=to_food.duration_seconds,
                distance_meters=to_food.distance_meters,
            ),
            route_from_restaurant=LegSummary(
                duration_seconds=from_food.duration_seconds,
                distance_meters=from_food.distance_meters,
            ),
            outdoor_filtered=rain_expected,
            combined_score=combined_score(
                "foodie", to_food.duration_seconds, [selected_score], weather_scores.overall
            ),
        )
