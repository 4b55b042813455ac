"""Cache implementations."""

from forum.persistence.cache.inmemory import InMemoryRankingCache, InMemoryTokenBlacklist
from forum.persistence.cache.redis_cache import RedisRankingCache, RedisTokenBlacklist

__all__ = [
    "InMemoryRankingCache",
    "InMemoryTokenBlacklist",
    "RedisRankingCache",
    "RedisTokenBlacklist",
]
