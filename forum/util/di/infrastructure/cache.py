"""Cache infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from redis.asyncio import Redis

from forum.config import CacheSettings
from forum.domain.cache import RankingCache, TokenBlacklist
from forum.persistence.cache import RedisRankingCache, RedisTokenBlacklist
from forum.util.di.base import ProviderBase
from forum.util.observability import instrument_redis


class CacheProvider(ProviderBase):
    """Cache component base."""

    __mock_component__ = "cache"


class ProdCacheProvider(CacheProvider):
    """Production cache provider using Redis."""

    __is_mock__ = False

    scope = Scope.APP

    @provide
    async def get_redis(self, settings: CacheSettings) -> AsyncIterator[Redis]:
        """Provide Redis client, closed on shutdown."""
        instrument_redis()
        client = Redis.from_url(settings.url, decode_responses=True)
        logfire.info("Redis client created", url=settings.url)
        yield client
        await client.aclose()

    @provide
    def get_ranking_cache(self, client: Redis, settings: CacheSettings) -> RankingCache:
        """Provide ranking cache."""
        return RedisRankingCache(client, settings)

    @provide
    def get_token_blacklist(self, client: Redis) -> TokenBlacklist:
        """Provide token blacklist."""
        return RedisTokenBlacklist(client)
