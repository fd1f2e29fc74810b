from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel

from waypoint.schemas.weather import GeoPoint, WeatherInsights

Mode = Literal["efficiency", "scenic", "foodie"]
MODES: tuple[str, ...] = ("efficiency", "scenic", "foodie")


class UserPrefs(BaseModel):
    prefer_scenic: bool = False
    prefer_culinary: bool = False
    time_constrained: bool = False


class OptimizeRequest(BaseModel):
    origin: GeoPoint
    destination: GeoPoint
    user_prefs: UserPrefs | None = None


# ─── Disable causes ───


class DisableKind(str, Enum):
    LOW_VISIBILITY = "low_visibility"
    HIGH_RAIN_CHANCE = "high_rain_chance"
    NO_QUALIFYING_RESTAURANT = "no_qualifying_restaurant"
    ROUTE_FAILED = "route_failed"
    RESTAURANT_SEARCH_FAILED = "restaurant_search_failed"


def _num(value: float) -> str:
    """Render 3.0 as '3' and 3.5 as '3.5'."""
    return f"{value:g}"


class DisableCause(BaseModel):
    """Why a mode was disabled, with the measurement that tripped it."""

    kind: DisableKind
    visibility_km: float | None = None
    precipitation_pct: float | None = None

    @classmethod
    def low_visibility(cls, km: float) -> "DisableCause":
        return cls(kind=DisableKind.LOW_VISIBILITY, visibility_km=km)

    @classmethod
    def high_rain_chance(cls, pct: float) -> "DisableCause":
        return cls(kind=DisableKind.HIGH_RAIN_CHANCE, precipitation_pct=pct)

    @property
    def message(self) -> str:
        if self.kind == DisableKind.LOW_VISIBILITY:
            return f"Foggy view: visibility {_num(self.visibility_km)}km < 5km minimum"
        if self.kind == DisableKind.HIGH_RAIN_CHANCE:
            return f"Rain expected: {_num(self.precipitation_pct)}% > 30% threshold"
        if self.kind == DisableKind.NO_QUALIFYING_RESTAURANT:
            return "No qualifying restaurants (rating >= 4.4, reviews >= 100)"
        if self.kind == DisableKind.RESTAURANT_SEARCH_FAILED:
            return "Restaurant search failed"
        return "Route calculation failed"

    @property
    def icon(self) -> str:
        return {
            DisableKind.LOW_VISIBILITY: "fog",
            DisableKind.HIGH_RAIN_CHANCE: "rain",
            DisableKind.NO_QUALIFYING_RESTAURANT: "utensils",
            DisableKind.RESTAURANT_SEARCH_FAILED: "utensils",
        }.get(self.kind, "warning")


# ─── Mode packages ───


class RouteSummary(BaseModel):
    polyline: str | None
    duration_seconds: int
    distance_meters: int
    traffic_delay_seconds: int = 0


class ScenicRouteSummary(BaseModel):
    polyline: str | None
    duration_seconds: int
    distance_meters: int
    scenic_score: float


class LegSummary(BaseModel):
    duration_seconds: int
    distance_meters: int


class Stop(BaseModel):
    place_id: str
    name: str
    location: GeoPoint
    rating: float | None
    user_ratings_total: int | None = None
    types: list[str] = []
    attributes: list[str] = []
    detour_minutes: float | None = None
    score: float


class SelectedRestaurant(BaseModel):
    place_id: str
    name: str
    location: GeoPoint
    rating: float
    user_ratings_total: int
    types: list[str]
    price_level: int
    score: float
    why_selected: list[str]


class RestaurantAlternative(BaseModel):
    name: str
    rating: float
    score: float


class EfficiencyPackage(BaseModel):
    mode: Literal["efficiency"] = "efficiency"
    disabled: Literal[False] = False
    route: RouteSummary
    stops: list[Stop]
    total_duration_seconds: int
    hazard_alert: bool
    combined_score: float


class ScenicPackage(BaseModel):
    mode: Literal["scenic"] = "scenic"
    disabled: Literal[False] = False
    route: ScenicRouteSummary
    duration_increase: str
    stops: list[Stop]
    weather_visibility: float
    combined_score: float


class FoodiePackage(BaseModel):
    mode: Literal["foodie"] = "foodie"
    disabled: Literal[False] = False
    selected_restaurant: SelectedRestaurant
    alternatives: list[RestaurantAlternative]
    route_to_restaurant: LegSummary
    route_from_restaurant: LegSummary
    outdoor_filtered: bool
    combined_score: float


class DisabledPackage(BaseModel):
    mode: Mode
    disabled: Literal[True] = True
    cause: DisableCause
    reason: str
    downgrade_warning: bool = False
    fallback_mode: Mode | None = None

    @classmethod
    def from_cause(
        cls, mode: str, cause: DisableCause, fallback_mode: str | None = None
    ) -> "DisabledPackage":
        return cls(
            mode=mode,
            cause=cause,
            reason=cause.message,
            downgrade_warning=fallback_mode is not None,
            fallback_mode=fallback_mode,
        )


ModePackage = EfficiencyPackage | ScenicPackage | FoodiePackage | DisabledPackage


class Packages(BaseModel):
    efficiency: EfficiencyPackage | DisabledPackage
    scenic: ScenicPackage | DisabledPackage
    foodie: FoodiePackage | DisabledPackage

    def items(self) -> list[tuple[str, ModePackage]]:
        return [(mode, getattr(self, mode)) for mode in MODES]


# ─── Result ───


class DisabledMode(BaseModel):
    mode: Mode
    reason: str
    icon: str


class ResultMetadata(BaseModel):
    request_id: str
    generated_at: datetime
    processing_time_ms: int


class OptimizationResult(BaseModel):
    ok: bool = True
    recommended: Mode
    recommendation_reason: str
    packages: Packages
    weather_insights: WeatherInsights
    disabled_modes: list[DisabledMode]
    metadata: ResultMetadata
