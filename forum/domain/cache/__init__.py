"""Cache interfaces for the forum domain."""

from forum.domain.cache.blacklist import TokenBlacklist
from forum.domain.cache.ranking import RankingCache

__all__ = ["RankingCache", "TokenBlacklist"]
