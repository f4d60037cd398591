"""Redis cache service for exchange-rate quotes."""

import json
import logging
from typing import Any

import redis.asyncio as redis

from tripwise.config import settings

logger = logging.getLogger(__name__)


class CacheService:
    """Redis-backed cache. Every method degrades to a miss when redis is down."""

    def __init__(self):
        self._redis: redis.Redis | None = None
        self._disabled = not settings.fx_cache_enabled

    async def _get_redis(self) -> redis.Redis | None:
        if self._disabled:
            return None
        if self._redis is None:
            try:
                self._redis = redis.from_url(
                    settings.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                await self._redis.ping()
            except Exception as e:
                logger.warning(f"Redis unavailable, rate cache disabled: {e}")
                self._redis = None
                self._disabled = True
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

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Set a value in cache with TTL. Returns False on error."""
        try:
            r = await self._get_redis()
            if r is None:
                return False
            await r.set(key, json.dumps(value, default=str), ex=ttl or settings.fx_cache_ttl_seconds)
            return True
        except Exception:
            return False

    # Typed helpers

    @staticmethod
    def fx_key(base: str, symbol: str) -> str:
        return f"fx:{base.upper()}:{symbol.upper()}"

    async def get_fx_rate(self, base: str, symbol: str) -> float | None:
        value = await self.get(self.fx_key(base, symbol))
        return float(value) if value is not None else None

    async def set_fx_rate(self, base: str, symbol: str, rate: float) -> bool:
        return await self.set(self.fx_key(base, symbol), rate)

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None


cache_service = CacheService()
