"""Route optimizer — builds the three mode packages for one trip request."""

import asyncio
import logging
import time
from datetime import datetime, timezone

from waypoint.schemas.planner import (
    DisableCause,
    DisabledMode,
    DisabledPackage,
    DisableKind,
    OptimizationResult,
    Packages,
    ResultMetadata,
    UserPrefs,
)
from waypoint.schemas.weather import GeoPoint, WeatherInsights
from waypoint.services.mode_optimizers import EfficiencyOptimizer, FoodieOptimizer, ScenicOptimizer
from waypoint.services.providers import PlacesProvider, RoutingProvider, WeatherProvider
from waypoint.services.recommender import recommend
from waypoint.services.weather_scorer import score_weather, weather_alerts

logger = logging.getLogger(__name__)

FAILURE_CAUSES = {
    "efficiency": DisableKind.ROUTE_FAILED,
    "scenic": DisableKind.ROUTE_FAILED,
    "foodie": DisableKind.RESTAURANT_SEARCH_FAILED,
}


class RouteOptimizer:
    """Coordinates weather, the three mode optimizers and the recommender."""

    def __init__(
        self,
        routing: RoutingProvider,
        places: PlacesProvider,
        weather: WeatherProvider,
    ):
        self.weather = weather
        self.optimizers = {
            "efficiency": EfficiencyOptimizer(routing, places),
            "scenic": ScenicOptimizer(routing, places),
            "foodie": FoodieOptimizer(routing, places),
        }

    async def generate_packages(
        self,
        origin: GeoPoint,
        destination: GeoPoint,
        user_prefs: UserPrefs | None = None,
        now: datetime | None = None,
    ) -> OptimizationResult:
        """
        Fetch one weather snapshot, run every mode in parallel and recommend one.

        Only a weather failure propagates; each mode degrades to a disabled
        package on its own.
        """
        start_time = time.monotonic()

        weather = await self.weather.get_current(destination)
        weather_scores = score_weather(weather)

        modes = list(self.optimizers)
        results = await asyncio.gather(
            *[
                self.optimizers[m].optimize(origin, destination, weather, weather_scores)
                for m in modes
            ],
            return_exceptions=True,
        )

        packages = {}
        for mode, result in zip(modes, results):
            if isinstance(result, Exception):
                logger.error(f"{mode} optimizer crashed: {result}")
                result = DisabledPackage.from_cause(mode, DisableCause(kind=FAILURE_CAUSES[mode]))
            packages[mode] = result
        packages = Packages(**packages)

        recommendation = recommend(
            weather_scores, user_prefs, packages, now=now, visibility_km=weather.visibility
        )

        disabled_modes = [
            DisabledMode(mode=mode, reason=pkg.reason, icon=pkg.cause.icon)
            for mode, pkg in packages.items()
            if pkg.disabled
        ]
        if disabled_modes:
            logger.info(
                "Disabled modes: "
                + ", ".join(f"{d.mode} ({d.reason})" for d in disabled_modes)
            )

        return OptimizationResult(
            recommended=recommendation.mode,
            recommendation_reason=recommendation.reason,
            packages=packages,
            weather_insights=WeatherInsights(
                current=weather,
                scores=weather_scores,
                alerts=weather_alerts(weather),
            ),
            disabled_modes=disabled_modes,
            metadata=ResultMetadata(
                request_id=f"opt_{int(time.time() * 1000)}",
                generated_at=datetime.now(timezone.utc),
                processing_time_ms=int((time.monotonic() - start_time) * 1000),
            ),
        )
