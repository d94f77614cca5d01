"""Sliding-window rate limiting for TraderFM."""

from __future__ import annotations

import logging
import math
import time
import uuid
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock
from typing import Protocol

import redis

from traderfm.core.settings import settings

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class RateDecision:
    """Outcome of counting one request against a window."""

    allowed: bool
    remaining: int
    retry_after: int


class RateLimitBackend(Protocol):
    def hit(self, key: str, limit: int, window_seconds: int) -> RateDecision: ...

    def reset(self) -> None: ...


class MemoryRateLimitBackend:
    """In-process sliding window: one deque of request timestamps per key.

    Keys whose window has fully expired are dropped, either when they are hit
    again or by a sweep that runs at most once per ``sweep_interval_seconds``.
    """

    def __init__(self, clock: Clock = time.monotonic, sweep_interval_seconds: float = 60.0) -> None:
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._windows: dict[str, int] = {}
        self._lock = Lock()
        self._sweep_interval = sweep_interval_seconds
        self._last_sweep = clock()

    @property
    def tracked_keys(self) -> int:
        """Number of keys currently holding at least one timestamp."""
        with self._lock:
            return len(self._hits)

    def _forget(self, key: str) -> None:
        self._hits.pop(key, None)
        self._windows.pop(key, None)

    def _sweep(self, now: float) -> None:
        for key, hits in list(self._hits.items()):
            if not hits or hits[-1] <= now - self._windows[key]:
                self._forget(key)
        self._last_sweep = now

    def hit(self, key: str, limit: int, window_seconds: int) -> RateDecision:
        now = self._clock()
        cutoff = now - window_seconds
        with self._lock:
            if now - self._last_sweep >= self._sweep_interval:
                self._sweep(now)

            hits = self._hits.get(key)
            if hits is not None:
                while hits and hits[0] <= cutoff:
                    hits.popleft()
                if not hits:
                    self._forget(key)
                    hits = None

            if hits is not None and len(hits) >= limit:
                retry_after = math.ceil(hits[0] + window_seconds - now)
                return RateDecision(allowed=False, remaining=0, retry_after=max(retry_after, 1))
            if hits is None and limit < 1:
                return RateDecision(allowed=False, remaining=0, retry_after=window_seconds)

            if hits is None:
                hits = self._hits[key] = deque()
            self._windows[key] = window_seconds
            hits.append(now)
            return RateDecision(allowed=True, remaining=limit - len(hits), retry_after=0)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
            self._windows.clear()


class RedisRateLimitBackend:
    """Sliding window stored in a Redis sorted set scored by request time."""

    def __init__(self, client: redis.Redis, clock: Clock = time.time) -> None:
        self._redis = client
        self._clock = clock

    def hit(self, key: str, limit: int, window_seconds: int) -> RateDecision:
        now = self._clock()
        redis_key = f"ratelimit:{key}"
        member = f"{now:.6f}:{uuid.uuid4().hex}"

        pipe = self._redis.pipeline()
        pipe.zremrangebyscore(redis_key, 0, now - window_seconds)
        pipe.zadd(redis_key, {member: now})
        pipe.zcard(redis_key)
        pipe.expire(redis_key, int(window_seconds))
        _, _, count, _ = pipe.execute()

        if int(count) > limit:
            self._redis.zrem(redis_key, member)
            oldest = self._redis.zrange(redis_key, 0, 0, withscores=True)
            retry_after = window_seconds
            if oldest:
                retry_after = math.ceil(float(oldest[0][1]) + window_seconds - now)
            return RateDecision(allowed=False, remaining=0, retry_after=max(retry_after, 1))
        return RateDecision(allowed=True, remaining=limit - int(count), retry_after=0)

    def reset(self) -> None:
        for redis_key in self._redis.scan_iter(match="ratelimit:*"):
            self._redis.delete(redis_key)


class RateLimiter:
    """Applies the global and per-target question limits."""

    def __init__(
        self,
        backend: RateLimitBackend,
        *,
        global_max: int,
        global_window_seconds: int,
        question_max: int,
        question_window_seconds: int,
    ) -> None:
        self.backend = backend
        self.global_max = global_max
        self.global_window_seconds = global_window_seconds
        self.question_max = question_max
        self.question_window_seconds = question_window_seconds

    def check_global(self, client_ip: str) -> RateDecision:
        """Count a request against the caller's global window."""
        return self.backend.hit(
            f"global:{client_ip}",
            self.global_max,
            self.global_window_seconds,
        )

    def check_question(self, client_ip: str, handle: str) -> RateDecision:
        """Count a question submission keyed by ``(client_ip, handle)``."""
        return self.backend.hit(
            f"question:{client_ip}:{handle.lower()}",
            self.question_max,
            self.question_window_seconds,
        )

    def reset(self) -> None:
        self.backend.reset()


def build_rate_limiter() -> RateLimiter:
    """Create a limiter from settings."""
    backend: RateLimitBackend
    if settings.rate_limit_backend == "redis":
        backend = RedisRateLimitBackend(redis.from_url(settings.redis_url))
        logger.info("Rate limiting backed by Redis at %s", settings.redis_url)
    else:
        backend = MemoryRateLimitBackend()
    return RateLimiter(
        backend,
        global_max=settings.rate_limit_global_max,
        global_window_seconds=settings.rate_limit_global_window_seconds,
        question_max=settings.rate_limit_question_max,
        question_window_seconds=settings.rate_limit_question_window_seconds,
    )


_RATE_LIMITER: RateLimiter | None = None
_LIMITER_LOCK = Lock()


def get_rate_limiter() -> RateLimiter:
    """Return the process-wide rate limiter, building it on first use."""
    global _RATE_LIMITER
    with _LIMITER_LOCK:
        if _RATE_LIMITER is None:
            _RATE_LIMITER = build_rate_limiter()
        return _RATE_LIMITER
