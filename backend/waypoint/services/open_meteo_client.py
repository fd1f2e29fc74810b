"""Open-Meteo client — current conditions for a coordinate."""

import logging

import httpx

from waypoint.config import settings
from waypoint.schemas.weather import GeoPoint, WeatherSnapshot
from waypoint.services.providers import ProviderError

logger = logging.getLogger(__name__)

# Open-Meteo serves hourly-only variables at the current 15-minute step too
CURRENT_FIELDS = [
    "temperature_2m",
    "precipitation",
    "precipitation_probability",
    "visibility",
    "wind_speed_10m",
    "cloud_cover",
]


class OpenMeteoClient:
    """Adapter for the Open-Meteo forecast API (no key required)."""

    def __init__(self):
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=settings.open_meteo_base_url,
                timeout=settings.provider_timeout_seconds,
            )
        return self._client

    async def get_current(self, location: GeoPoint) -> WeatherSnapshot:
        client = await self._get_client()
        try:
            resp = await client.get(
                "/forecast",
                params={
                    "latitude": str(location.lat),
                    "longitude": str(location.lng),
                    "current": ",".join(CURRENT_FIELDS),
                    "timezone": "auto",
                },
            )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise ProviderError(f"Open-Meteo request failed: {e}") from e

        return self._to_snapshot(data)

    @staticmethod
    def _to_snapshot(data: dict) -> WeatherSnapshot:
        current = data.get("current", {})

        fields = {
            "temperature": current.get("temperature_2m"),
            "precipitation": current.get("precipitation"),
            "precipitation_probability": current.get("precipitation_probability"),
            "wind_speed": current.get("wind_speed_10m"),
            "cloud_cover": current.get("cloud_cover"),
        }
        visibility_m = current.get("visibility")
        if visibility_m is not None:
            fields["visibility"] = visibility_m / 1000  # m -> km

        # Missing values fall back to the model defaults
        return WeatherSnapshot(**{k: v for k, v in fields.items() if v is not None})

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None


open_meteo_client = OpenMeteoClient()
