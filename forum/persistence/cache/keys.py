"""Redis key layout."""

from forum.domain.value import PostId, RankingOrder

# Sorted set: post ID -> hot score
POST_RANKING_KEY = "post:ranking"

# Sorted set: post ID -> unix creation timestamp
POST_TIME_KEY = "post:time"

SUMMARY_KEY_PREFIX = "post:id:"
BLACKLIST_KEY_PREFIX = "blacklist:token:"


def summary_key(post_id: PostId) -> str:
    return f"{SUMMARY_KEY_PREFIX}{post_id}"


def ranking_key(order: RankingOrder) -> str:
    return POST_RANKING_KEY if order == RankingOrder.HOT else POST_TIME_KEY


def blacklist_key(token: str) -> str:
    return f"{BLACKLIST_KEY_PREFIX}{token}"
