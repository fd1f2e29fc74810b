"""POI scoring — per-mode candidate scores and the blended package score."""

import math
from dataclasses import dataclass

from waypoint.services.providers import Candidate


@dataclass(frozen=True)
class ScoreWeights:
    poi: float
    route: float
    weather: float


MODE_WEIGHTS = {
    "efficiency": ScoreWeights(poi=0.25, route=0.55, weather=0.20),
    "scenic": ScoreWeights(poi=0.35, route=0.30, weather=0.35),
    "foodie": ScoreWeights(poi=0.65, route=0.15, weather=0.20),
}

# Efficiency
EFFICIENCY_MIN_RATING = 4.0
EFFICIENCY_DETOUR_DECAY_MINUTES = 5.0
EFFICIENCY_TYPE_BONUS = 1.2
EFFICIENCY_BONUS_TYPES = {"cafe", "fast_food"}
DEFAULT_DETOUR_MINUTES = 3.0

# Scenic
SCENIC_DEFAULT_RATING = 4.0
SCENIC_DEFAULT_REVIEWS = 10
SCENIC_ATTRIBUTE_BONUSES = {"view": 0.3, "outdoor_seating": 0.2}
SCENIC_PARK_BONUS = 0.15
SCENIC_MAX_VISIBILITY_BONUS = 1.5

# Combined score
POI_SCORE_SCALE = 5.0
ROUTE_REFERENCE_SECONDS = 3600
NEUTRAL_SUBSCORE = 0.5


def detour_minutes(candidate: Candidate) -> float:
    if candidate.detour_minutes is None:
        return DEFAULT_DETOUR_MINUTES
    return candidate.detour_minutes


def efficiency_score(candidate: Candidate) -> float:
    """Quick-stop value: rating x review volume, decayed by detour time."""
    if candidate.rating is None or candidate.rating < EFFICIENCY_MIN_RATING:
        return 0.0

    base = candidate.rating * math.log1p(candidate.review_count)
    deviation_penalty = math.exp(-detour_minutes(candidate) / EFFICIENCY_DETOUR_DECAY_MINUTES)
    type_bonus = EFFICIENCY_TYPE_BONUS if EFFICIENCY_BONUS_TYPES.intersection(candidate.types) else 1.0

    return base * deviation_penalty * type_bonus


def scenic_score(candidate: Candidate, visibility_km: float) -> float:
    """Scenic value: attribute bonuses stack additively; clear air boosts everything."""
    rating = candidate.rating if candidate.rating is not None else SCENIC_DEFAULT_RATING
    base = rating * math.log1p(candidate.review_count or SCENIC_DEFAULT_REVIEWS)

    attribute_bonus = 1.0
    for attribute, bonus in SCENIC_ATTRIBUTE_BONUSES.items():
        if attribute in candidate.attributes:
            attribute_bonus += bonus
    if "park" in candidate.types:
        attribute_bonus += SCENIC_PARK_BONUS

    visibility_bonus = min(visibility_km / 10, SCENIC_MAX_VISIBILITY_BONUS)

    return base * attribute_bonus * visibility_bonus


def foodie_score(candidate: Candidate) -> float:
    rating = candidate.rating or 0.0
    reviews = candidate.review_count

    base = rating * math.log1p(reviews) ** 1.5

    if rating >= 4.8:
        rating_bonus = 1.3
    elif rating >= 4.6:
        rating_bonus = 1.15
    else:
        rating_bonus = 1.0

    if reviews >= 1000:
        volume_bonus = 1.2
    elif reviews >= 500:
        volume_bonus = 1.1
    else:
        volume_bonus = 1.0

    return base * rating_bonus * volume_bonus


def combined_score(
    mode: str,
    route_duration_seconds: int,
    poi_scores: list[float],
    weather_overall: float,
) -> float:
    """
    Blend POI quality, route quality and weather suitability for one mode.

    poi: mean of the top three POI scores scaled by /5 and capped at 1
    (0.5 when there are no POIs). route: 3600 / duration capped at 1
    (0.5 when the duration is unknown). Rounded to two decimals.
    """
    w = MODE_WEIGHTS[mode]

    top = sorted(poi_scores, reverse=True)[:3]
    if top:
        poi = min(1.0, sum(top) / len(top) / POI_SCORE_SCALE)
    else:
        poi = NEUTRAL_SUBSCORE

    if route_duration_seconds > 0:
        route = min(1.0, ROUTE_REFERENCE_SECONDS / route_duration_seconds)
    else:
        route = NEUTRAL_SUBSCORE

    return round(w.poi * poi + w.route * route + w.weather * weather_overall, 2)
