from typing import Literal

from pydantic import BaseModel, Field

from waypoint.schemas.weather import GeoPoint, WeatherSnapshot

InterventionType = Literal["weather_outdoor_conflict", "traffic_delay", "weather_degradation"]
Severity = Literal["info", "warning", "urgent"]
SuggestionType = Literal["alternative_place", "route_change", "time_adjustment"]


class TripDestination(BaseModel):
    location: GeoPoint
    is_outdoor: bool = False
    name: str | None = None


class TripContext(BaseModel):
    destination: TripDestination
    current_weather: WeatherSnapshot
    previous_weather: WeatherSnapshot | None = None
    live_traffic_delay: int | None = Field(default=None, ge=0)  # seconds


class AlternativePlace(BaseModel):
    name: str
    location: GeoPoint
    distance_km: float
    is_indoor: bool = True


class Suggestion(BaseModel):
    id: str
    type: SuggestionType
    action_label: str
    place: AlternativePlace | None = None


class Intervention(BaseModel):
    id: str
    type: InterventionType
    severity: Severity
    title: str
    message: str
    reasoning: list[str]
    suggestions: list[Suggestion] = []
    status: Literal["pending"] = "pending"


class InterventionRequest(BaseModel):
    destination: TripDestination
    # Caller-chosen id for one active trip; repeats are suppressed only within it
    trip_id: str | None = Field(default=None, min_length=1, max_length=128)
    current_weather: WeatherSnapshot | None = None
    previous_weather: WeatherSnapshot | None = None
    live_traffic_delay: int | None = Field(default=None, ge=0)


class InterventionReport(BaseModel):
    ok: bool = True
    interventions: list[Intervention]
    check_interval_ms: int
    weather_snapshot: WeatherSnapshot


class ClassifyLocationRequest(BaseModel):
    place_id: str | None = None
    types: list[str] = []
    name: str = ""


class LocationClassification(BaseModel):
    is_outdoor: bool
    confidence: float
    types: list[str]
