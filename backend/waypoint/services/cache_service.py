"""Redis cache service for optimization results and intervention dedup."""

import json
import logging
from typing import Any

import redis.asyncio as redis

from waypoint.config import settings

logger = logging.getLogger(__name__)

# Coordinates are rounded before keying so nearby requests share entries
OPTIMIZE_KEY_PRECISION = 3      # ~100 m
INTERVENTION_KEY_PRECISION = 4  # ~10 m


class CacheService:
    """Redis-backed cache with typed TTLs."""

    def __init__(self):
        self._redis: redis.Redis | None = None

    async def _get_redis(self) -> redis.Redis | None:
        if self._redis is None:
            try:
                self._redis = redis.from_url(
                    settings.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                await self._redis.ping()
            except Exception as e:
                logger.warning(f"Redis unavailable, cache disabled: {e}")
                self._redis = None
                return None
        return self._redis

    async def get(self, key: str) -> Any | None:
        """Get a value from cache. Returns None on miss or error."""
        try:
            r = await self._get_redis()
            if r is None:
                return None
            raw = await r.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except Exception:
            return None

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        """Set a value in cache with TTL. Returns False on error."""
        try:
            r = await self._get_redis()
            if r is None:
                return False
            await r.set(key, json.dumps(value, default=str), ex=ttl)
            return True
        except Exception:
            return False

    async def set_if_absent(self, key: str, value: Any, ttl: int) -> bool:
        """Atomically claim a key. True if this call created it, or if Redis is down."""
        try:
            r = await self._get_redis()
            if r is None:
                return True
            created = await r.set(key, json.dumps(value, default=str), ex=ttl, nx=True)
            return bool(created)
        except Exception:
            return True

    # Typed helpers

    def optimize_key(self, origin: dict, destination: dict, user_prefs: dict | None) -> str:
        p = OPTIMIZE_KEY_PRECISION
        prefs = ",".join(sorted(k for k, v in (user_prefs or {}).items() if v)) or "none"
        return (
            f"optimize:{round(origin['lat'], p)},{round(origin['lng'], p)}:"
            f"{round(destination['lat'], p)},{round(destination['lng'], p)}:{prefs}"
        )

    def intervention_key(self, trip_id: str, location: dict, intervention_type: str, severity: str) -> str:
        p = INTERVENTION_KEY_PRECISION
        return (
            f"intervention:{trip_id}:{round(location['lat'], p)},{round(location['lng'], p)}:"
            f"{intervention_type}:{severity}"
        )

    async def get_optimization(self, origin: dict, destination: dict, user_prefs: dict | None) -> dict | None:
        return await self.get(self.optimize_key(origin, destination, user_prefs))

    async def set_optimization(self, origin: dict, destination: dict, user_prefs: dict | None, data: dict):
        await self.set(self.optimize_key(origin, destination, user_prefs), data, settings.optimize_cache_ttl)

    async def claim_intervention(
        self, trip_id: str, location: dict, intervention_type: str, severity: str
    ) -> bool:
        """False when this trip was already sent the same intervention within the dedup window."""
        if settings.intervention_dedup_ttl <= 0:
            return True
        return await self.set_if_absent(
            self.intervention_key(trip_id, location, intervention_type, severity),
            1,
            settings.intervention_dedup_ttl,
        )

    async def close(self):
        if self._redis:
            await self._redis.aclose()
            self._redis = None


cache_service = CacheService()
