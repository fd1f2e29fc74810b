"""Intervention monitor — decides whether to interrupt an active trip."""

import logging
import uuid

from waypoint.schemas.intervention import (
    AlternativePlace,
    Intervention,
    InterventionReport,
    Suggestion,
    TripContext,
    TripDestination,
)
from waypoint.schemas.weather import WeatherSnapshot
from waypoint.services.geo import haversine_km
from waypoint.services.providers import PlacesProvider, WeatherProvider

logger = logging.getLogger(__name__)

# Trigger 1: weather vs outdoor destination
OUTDOOR_RAIN_PCT = 40
OUTDOOR_MIN_VISIBILITY_KM = 2
OUTDOOR_MAX_WIND_KMH = 50
URGENT_RAIN_PCT = 60
URGENT_VISIBILITY_KM = 1
INDOOR_SEARCH_RADIUS_M = 20_000
MAX_INDOOR_ALTERNATIVES = 3

# Trigger 2: traffic
TRAFFIC_WARNING_SECONDS = 30 * 60
TRAFFIC_URGENT_SECONDS = 60 * 60

# Trigger 3: degradation since the previous snapshot
DEGRADATION_WARNING = 0.3
DEGRADATION_URGENT = 0.7
DEGRADATION_WIND_SCALE_KMH = 50
MATERIAL_RAIN_INCREASE_PCT = 20
MATERIAL_VISIBILITY_DROP_KM = 3
MATERIAL_WIND_INCREASE_KMH = 15

# Next poll interval
CHECK_INTERVAL_URGENT_MS = 60_000
CHECK_INTERVAL_WARNING_MS = 180_000
CHECK_INTERVAL_DEFAULT_MS = 300_000


def _intervention_id(suffix: str) -> str:
    return f"int_{uuid.uuid4().hex[:12]}_{suffix}"


def degradation(prev: WeatherSnapshot, curr: WeatherSnapshot) -> float:
    """Largest relative worsening across rain chance, visibility and wind."""
    precip_delta = (curr.precipitation_probability - prev.precipitation_probability) / 100
    vis_delta = (prev.visibility - curr.visibility) / prev.visibility if prev.visibility > 0 else 0.0
    wind_delta = (curr.wind_speed - prev.wind_speed) / DEGRADATION_WIND_SCALE_KMH
    return max(precip_delta, vis_delta, wind_delta)


def degradation_reasons(prev: WeatherSnapshot, curr: WeatherSnapshot) -> list[str]:
    reasons = []
    if curr.precipitation_probability > prev.precipitation_probability + MATERIAL_RAIN_INCREASE_PCT:
        reasons.append(
            f"Precipitation increased: {prev.precipitation_probability:g}% → {curr.precipitation_probability:g}%"
        )
    if curr.visibility < prev.visibility - MATERIAL_VISIBILITY_DROP_KM:
        reasons.append(f"Visibility dropped: {prev.visibility:g}km → {curr.visibility:g}km")
    if curr.wind_speed > prev.wind_speed + MATERIAL_WIND_INCREASE_KMH:
        reasons.append(f"Wind increased: {prev.wind_speed:g}km/h → {curr.wind_speed:g}km/h")
    return reasons


def next_check_interval_ms(interventions: list[Intervention]) -> int:
    if any(i.severity == "urgent" for i in interventions):
        return CHECK_INTERVAL_URGENT_MS
    if interventions:
        return CHECK_INTERVAL_WARNING_MS
    return CHECK_INTERVAL_DEFAULT_MS


def _weather_title(precip: float, visibility: float, wind: float) -> str:
    if precip > URGENT_RAIN_PCT:
        return "Heavy Rain Warning"
    if visibility < OUTDOOR_MIN_VISIBILITY_KM:
        return "Low Visibility Alert"
    if wind > OUTDOOR_MAX_WIND_KMH:
        return "Strong Wind Advisory"
    return "Weather Alert"


def _weather_message(name: str, precip: float, visibility: float) -> str:
    if precip > URGENT_RAIN_PCT:
        return f"Heavy rain expected at {name}. Consider indoor alternatives."
    if visibility < OUTDOOR_MIN_VISIBILITY_KM:
        return f"Visibility is very low at {name}. Outdoor activities may be affected."
    return f"Weather conditions at {name} may affect your plans."


class InterventionMonitor:
    """Stateless trigger evaluation over one trip context."""

    def __init__(self, places: PlacesProvider, weather: WeatherProvider):
        self.places = places
        self.weather = weather

    async def check_interventions(self, context: TripContext) -> list[Intervention]:
        interventions = []

        weather_conflict = await self._check_outdoor_weather(context)
        if weather_conflict:
            interventions.append(weather_conflict)

        traffic = self._check_traffic(context.live_traffic_delay)
        if traffic:
            interventions.append(traffic)

        if context.previous_weather is not None:
            degraded = self._check_degradation(context.previous_weather, context.current_weather)
            if degraded:
                interventions.append(degraded)

        return interventions

    async def evaluate(
        self,
        destination: TripDestination,
        current_weather: WeatherSnapshot | None = None,
        previous_weather: WeatherSnapshot | None = None,
        live_traffic_delay: int | None = None,
    ) -> InterventionReport:
        """Fetch weather if the caller has none, run all triggers, pick the next poll interval."""
        if current_weather is None:
            current_weather = await self.weather.get_current(destination.location)

        interventions = await self.check_interventions(TripContext(
            destination=destination,
            current_weather=current_weather,
            previous_weather=previous_weather,
            live_traffic_delay=live_traffic_delay,
        ))

        return InterventionReport(
            interventions=interventions,
            check_interval_ms=next_check_interval_ms(interventions),
            weather_snapshot=current_weather,
        )

    async def _check_outdoor_weather(self, context: TripContext) -> Intervention | None:
        destination = context.destination
        if not destination.is_outdoor:
            return None

        weather = context.current_weather
        precip = weather.precipitation_probability
        visibility = weather.visibility
        wind = weather.wind_speed

        if not (precip > OUTDOOR_RAIN_PCT or visibility < OUTDOOR_MIN_VISIBILITY_KM or wind > OUTDOOR_MAX_WIND_KMH):
            return None

        reasoning = []
        if precip > OUTDOOR_RAIN_PCT:
            reasoning.append(f"Precipitation: {precip:g}%")
        if visibility < OUTDOOR_MIN_VISIBILITY_KM:
            reasoning.append(f"Low visibility: {visibility:g}km")
        if wind > OUTDOOR_MAX_WIND_KMH:
            reasoning.append(f"Strong winds: {wind:g}km/h")

        name = destination.name or "your destination"
        return Intervention(
            id=_intervention_id("wx"),
            type="weather_outdoor_conflict",
            severity="urgent" if precip > URGENT_RAIN_PCT or visibility < URGENT_VISIBILITY_KM else "warning",
            title=_weather_title(precip, visibility, wind),
            message=_weather_message(name, precip, visibility),
            reasoning=reasoning,
            suggestions=await self._indoor_alternatives(destination),
        )

    async def _indoor_alternatives(self, destination: TripDestination) -> list[Suggestion]:
        try:
            places = await self.places.search(
                destination.location, INDOOR_SEARCH_RADIUS_M, "museum", keyword="indoor"
            )
        except Exception as e:
            logger.warning(f"Indoor alternatives search failed: {e}")
            return []

        return [
            Suggestion(
                id=p.id,
                type="alternative_place",
                action_label=f"Go to {p.name}",
                place=AlternativePlace(
                    name=p.name,
                    location=p.location,
                    distance_km=round(haversine_km(destination.location, p.location), 1),
                ),
            )
            for p in places[:MAX_INDOOR_ALTERNATIVES]
        ]

    def _check_traffic(self, delay_seconds: int | None) -> Intervention | None:
        if not delay_seconds or delay_seconds <= TRAFFIC_WARNING_SECONDS:
            return None

        minutes = round(delay_seconds / 60)
        return Intervention(
            id=_intervention_id("traffic"),
            type="traffic_delay",
            severity="urgent" if delay_seconds > TRAFFIC_URGENT_SECONDS else "warning",
            title="Significant Traffic Delay",
            message=f"Traffic adds {minutes} minutes to your route",
            reasoning=[f"Live traffic delay: {minutes} minutes"],
            suggestions=[Suggestion(id="recalculate", type="route_change", action_label="Find Faster Route")],
        )

    def _check_degradation(self, prev: WeatherSnapshot, curr: WeatherSnapshot) -> Intervention | None:
        score = degradation(prev, curr)
        if score <= DEGRADATION_WARNING:
            return None

        return Intervention(
            id=_intervention_id("degrade"),
            type="weather_degradation",
            severity="urgent" if score > DEGRADATION_URGENT else "warning",
            title="Weather Conditions Worsening",
            message="Weather has degraded since trip planning",
            reasoning=degradation_reasons(prev, curr),
            suggestions=[Suggestion(id="replan", type="time_adjustment", action_label="Adjust Trip Plan")],
        )
