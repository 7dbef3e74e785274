# cache.py
import json
import logging
import time
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

import redis.asyncio as aioredis

from sitecarbon.config import CACHE_BACKEND, REDIS_URL

log = logging.getLogger("sitecarbon")


class ResultCache(Protocol):
    async def get(self, key: str) -> Optional[Dict[str, Any]]: ...

    async def set(self, key: str, value: Dict[str, Any], ttl: int) -> None: ...


class MemoryCache:
    """Process-local store; entries expire ttl seconds after insertion."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Dict[str, Any]]] = {}

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: Dict[str, Any], ttl: int) -> None:
        now = self._clock()
        for k in [k for k, (exp, _) in self._entries.items() if now >= exp]:
            del self._entries[k]
        self._entries[key] = (now + ttl, value)

    def __len__(self) -> int:
        return len(self._entries)


class RedisCache:
    def __init__(self, client: aioredis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCache":
        return cls(aioredis.Redis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        value = await self.client.get(key)
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            log.warning("Discarding unreadable cache entry %s", key)
            return None

    async def set(self, key: str, value: Dict[str, Any], ttl: int) -> None:
        await self.client.set(key, json.dumps(value), ex=ttl)


def build_cache(backend: str = CACHE_BACKEND, redis_url: str = REDIS_URL) -> ResultCache:
    if backend == "memory":
        return MemoryCache()
    if backend == "redis":
        log.info("Using Redis result cache at %s", redis_url)
        return RedisCache.from_url(redis_url)
    raise ValueError(f"Unknown CACHE_BACKEND: {backend!r}")
