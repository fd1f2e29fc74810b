"""Recommender — picks one mode out of the three packages."""

from dataclasses import dataclass
from datetime import datetime

from waypoint.schemas.planner import MODES, Packages, UserPrefs
from waypoint.schemas.weather import WeatherScores

BASE_DESIRABILITY = 0.5
GREAT_WEATHER = 0.8
POOR_WEATHER = 0.6
GREAT_WEATHER_SCENIC_BONUS = 0.4
POOR_WEATHER_EFFICIENCY_BONUS = 0.3
MEAL_TIME_FOODIE_BONUS = 0.3
PREFERENCE_BONUS = 0.3

# Inclusive local-hour windows
MEAL_WINDOWS = ((11, 14), (18, 21))


@dataclass
class Recommendation:
    mode: str
    reason: str
    desirability: dict[str, float]


def is_meal_time(hour: int) -> bool:
    return any(start <= hour <= end for start, end in MEAL_WINDOWS)


def desirability_scores(
    weather_scores: WeatherScores,
    user_prefs: UserPrefs | None,
    packages: Packages,
    hour: int,
) -> dict[str, float]:
    scores = {mode: BASE_DESIRABILITY for mode in MODES}

    for mode, package in packages.items():
        if package.disabled:
            scores[mode] = 0.0

    if weather_scores.overall >= GREAT_WEATHER:
        scores["scenic"] += GREAT_WEATHER_SCENIC_BONUS
    if weather_scores.overall < POOR_WEATHER:
        scores["efficiency"] += POOR_WEATHER_EFFICIENCY_BONUS

    if is_meal_time(hour):
        scores["foodie"] += MEAL_TIME_FOODIE_BONUS

    if user_prefs:
        if user_prefs.prefer_scenic:
            scores["scenic"] += PREFERENCE_BONUS
        if user_prefs.prefer_culinary:
            scores["foodie"] += PREFERENCE_BONUS
        if user_prefs.time_constrained:
            scores["efficiency"] += PREFERENCE_BONUS

    return scores


def _best(scores: dict[str, float], modes) -> str:
    # max() keeps the first of equal scores, so MODES order is the tie-break
    return max(modes, key=lambda m: scores[m])


def recommend(
    weather_scores: WeatherScores,
    user_prefs: UserPrefs | None,
    packages: Packages,
    now: datetime | None = None,
    visibility_km: float | None = None,
) -> Recommendation:
    """
    Pick the mode with the highest desirability.

    Ties go to efficiency, then scenic, then foodie. When the winner is
    disabled (bonuses can lift a zeroed mode above the rest), the best
    enabled mode is substituted and the reason says so.
    """
    hour = (now or datetime.now()).hour
    scores = desirability_scores(weather_scores, user_prefs, packages, hour)
    mode = _best(scores, MODES)

    winner = getattr(packages, mode)
    if winner.disabled:
        enabled = [m for m, p in packages.items() if not p.disabled]
        if not enabled:
            return Recommendation(mode, "No travel mode is available right now", scores)
        substitute = _best(scores, enabled)
        return Recommendation(
            substitute,
            f"{mode} unavailable ({winner.reason}), defaulting to {substitute}",
            scores,
        )

    if mode == "scenic" and weather_scores.overall >= GREAT_WEATHER:
        if visibility_km is not None:
            reason = f"Excellent visibility ({visibility_km:g}km) and low precipitation"
        else:
            reason = "Excellent visibility and low precipitation"
    elif mode == "efficiency" and weather_scores.overall < POOR_WEATHER:
        reason = "Weather conditions suggest faster route"
    elif mode == "foodie" and is_meal_time(hour):
        reason = "Perfect timing for a culinary experience"
    else:
        reason = "Based on current conditions and preferences"

    return Recommendation(mode, reason, scores)
