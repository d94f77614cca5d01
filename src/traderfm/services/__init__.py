# src/traderfm/services/__init__.py
"""Business logic services for the TraderFM application."""

from .profanity import ProfanityFilter, contains_profanity
from .rate_limit import MemoryRateLimitBackend, RateLimiter, RedisRateLimitBackend

__all__ = [
    "ProfanityFilter",
    "contains_profanity",
    "MemoryRateLimitBackend",
    "RateLimiter",
    "RedisRateLimitBackend",
]
