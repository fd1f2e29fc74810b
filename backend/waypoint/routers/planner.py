"""Planner router — route packages, mid-trip interventions, place classification."""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException

from waypoint.config import settings
from waypoint.dependencies import get_cache, get_intervention_monitor, get_route_optimizer
from waypoint.schemas.intervention import (
    ClassifyLocationRequest,
    InterventionReport,
    InterventionRequest,
    LocationClassification,
)
from waypoint.schemas.planner import OptimizationResult, OptimizeRequest
from waypoint.services.cache_service import CacheService
from waypoint.services.intervention_monitor import InterventionMonitor
from waypoint.services.location_classifier import classify_location
from waypoint.services.route_optimizer import RouteOptimizer

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/optimize", response_model=OptimizationResult)
async def optimize(
    req: OptimizeRequest,
    optimizer: RouteOptimizer = Depends(get_route_optimizer),
    cache: CacheService = Depends(get_cache),
):
    """Build efficiency, scenic and foodie packages and recommend one."""
    origin = req.origin.model_dump()
    destination = req.destination.model_dump()
    prefs = req.user_prefs.model_dump() if req.user_prefs else None
    logger.info(
        f"Optimize: {req.origin.lat},{req.origin.lng} -> {req.destination.lat},{req.destination.lng}"
    )

    cached = await cache.get_optimization(origin, destination, prefs)
    if cached:
        logger.info("Optimize served from cache")
        return cached

    try:
        result = await asyncio.wait_for(
            optimizer.generate_packages(req.origin, req.destination, req.user_prefs),
            timeout=settings.optimize_timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.error(f"Optimize timed out after {settings.optimize_timeout_seconds}s")
        raise HTTPException(status_code=504, detail="Route optimization timed out")
    except Exception as e:
        logger.error(f"Optimizer error: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate route packages")

    await cache.set_optimization(origin, destination, prefs, result.model_dump(mode="json"))
    return result


@router.post("/interventions", response_model=InterventionReport)
async def check_interventions(
    req: InterventionRequest,
    monitor: InterventionMonitor = Depends(get_intervention_monitor),
    cache: CacheService = Depends(get_cache),
):
    """Evaluate live conditions for an active trip."""
    logger.info(f"Intervention check for: {req.destination.name or 'unnamed'}")

    try:
        report = await monitor.evaluate(
            destination=req.destination,
            current_weather=req.current_weather,
            previous_weather=req.previous_weather,
            live_traffic_delay=req.live_traffic_delay,
        )
    except Exception as e:
        logger.error(f"Intervention check error: {e}")
        raise HTTPException(status_code=500, detail="Failed to check interventions")

    if not req.trip_id:
        return report

    # Suppress interventions already delivered to this trip.
    # The poll interval still reflects every active condition.
    location = req.destination.location.model_dump()
    fresh = [
        i for i in report.interventions
        if await cache.claim_intervention(req.trip_id, location, i.type, i.severity)
    ]
    if len(fresh) < len(report.interventions):
        logger.info(f"Suppressed {len(report.interventions) - len(fresh)} repeated interventions")
        report = report.model_copy(update={"interventions": fresh})

    return report


@router.post("/classify-location", response_model=LocationClassification)
async def classify(req: ClassifyLocationRequest):
    """Guess whether a place is indoors or outdoors."""
    return classify_location(req.types, req.name)
