"""Small coordinate helpers shared by the optimizers and the monitor."""

import math

from waypoint.schemas.weather import GeoPoint

EARTH_RADIUS_KM = 6371.0


def midpoint(origin: GeoPoint, destination: GeoPoint) -> GeoPoint:
    """Arithmetic midpoint; good enough for trips of a few dozen km."""
    return GeoPoint(
        lat=(origin.lat + destination.lat) / 2,
        lng=(origin.lng + destination.lng) / 2,
    )


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    lat1, lon1, lat2, lon2 = map(math.radians, (a.lat, a.lng, b.lat, b.lng))
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))
