"""Domain value objects for the forum."""

from forum.domain.value.identifiers import (
    CommentId,
    CommunityId,
    PostId,
    UserId,
    VoteId,
)
from forum.domain.value.types import MessageKind, RankingOrder, VotableType, VoteValue

__all__ = [
    # Identifiers
    "UserId",
    "PostId",
    "CommentId",
    "CommunityId",
    "VoteId",
    # Types
    "MessageKind",
    "RankingOrder",
    "VotableType",
    "VoteValue",
]
