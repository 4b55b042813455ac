"""Vote use cases."""

from .get_vote_count import GetVoteCountRequest, GetVoteCountResponse, GetVoteCountUseCase
from .remove_vote import RemoveVoteRequest, RemoveVoteUseCase
from .upvote import UpvoteRequest, UpvoteUseCase, VoteAcceptedResponse

__all__ = [
    "GetVoteCountRequest",
    "GetVoteCountResponse",
    "GetVoteCountUseCase",
    "RemoveVoteRequest",
    "RemoveVoteUseCase",
    "UpvoteRequest",
    "UpvoteUseCase",
    "VoteAcceptedResponse",
]
