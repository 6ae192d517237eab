import asyncio
from typing import Dict, Optional, Tuple

import redis.asyncio as aioredis

from config import ApplicationConfig
from raffle_desk.app.services.rate_window_store import RateWindowStore, WindowHit


class RedisRateWindowStore(RateWindowStore):
    """Fixed windows kept in Redis hashes, one per key, expiring with the window"""

    # KEYS[1] = window key
    # ARGV = now, limit, window_seconds
    _FIXED_WINDOW_SCRIPT = """
local key = KEYS[1]
local now = tonumber(ARGV[1])
local limit = tonumber(ARGV[2])
local window = tonumber(ARGV[3])

local data = redis.call('HMGET', key, 'count', 'start')
local count = tonumber(data[1])
local start = tonumber(data[2])

if count == nil or start == nil or now - start >= window then
  redis.call('HSET', key, 'count', 1, 'start', ARGV[1])
  redis.call('EXPIRE', key, window)
  return {1, 1, ARGV[1]}
end

if count >= limit then
  return {0, count, data[2]}
end

count = redis.call('HINCRBY', key, 'count', 1)
return {1, count, data[2]}
"""

    def __init__(
        self,
        redis_url: Optional[str] = None,
        socket_timeout: Optional[float] = None,
        client: Optional[aioredis.Redis] = None,
    ):
        if client is None:
            timeout = socket_timeout or ApplicationConfig.REDIS_SOCKET_TIMEOUT
            client = aioredis.from_url(
                redis_url or ApplicationConfig.REDIS_URL,
                decode_responses=True,
                socket_timeout=timeout,
                socket_connect_timeout=timeout,
            )
        self.client = client
        self._fixed_window = self.client.register_script(self._FIXED_WINDOW_SCRIPT)

    async def hit(self, key: str, limit: int, window_seconds: int, now: float) -> WindowHit:
        allowed, count, start = await self._fixed_window(
            keys=[key], args=[repr(float(now)), limit, window_seconds]
        )
        return WindowHit(
            allowed=bool(int(allowed)), count=int(count), window_start=float(start)
        )

    async def close(self) -> None:
        await self.client.aclose()


class MemoryRateWindowStore(RateWindowStore):
    """Process-local windows for single-worker deployments and tests"""

    def __init__(self):
        self._windows: Dict[str, Tuple[int, float, int]] = {}
        self._lock = asyncio.Lock()

    async def hit(self, key: str, limit: int, window_seconds: int, now: float) -> WindowHit:
        async with self._lock:
            self._purge(now)
            window = self._windows.get(key)
            if window is None or now - window[1] >= window_seconds:
                self._windows[key] = (1, now, window_seconds)
                return WindowHit(allowed=True, count=1, window_start=now)

            count, start, _ = window
            if count >= limit:
                return WindowHit(allowed=False, count=count, window_start=start)

            self._windows[key] = (count + 1, start, window_seconds)
            return WindowHit(allowed=True, count=count + 1, window_start=start)

    def _purge(self, now: float) -> None:
        expired = [
            key
            for key, (_, start, window_seconds) in self._windows.items()
            if now - start >= window_seconds
        ]
        for key in expired:
            del self._windows[key]
