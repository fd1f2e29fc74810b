from waypoint.services.cache_service import CacheService, cache_service
from waypoint.services.google_maps_client import google_maps_client
from waypoint.services.intervention_monitor import InterventionMonitor
from waypoint.services.open_meteo_client import open_meteo_client
from waypoint.services.route_optimizer import RouteOptimizer

# Google Maps serves both routing and places
route_optimizer = RouteOptimizer(
    routing=google_maps_client,
    places=google_maps_client,
    weather=open_meteo_client,
)
intervention_monitor = InterventionMonitor(places=google_maps_client, weather=open_meteo_client)


def get_route_optimizer() -> RouteOptimizer:
    return route_optimizer


def get_intervention_monitor() -> InterventionMonitor:
    return intervention_monitor


def get_cache() -> CacheService:
    return cache_service
