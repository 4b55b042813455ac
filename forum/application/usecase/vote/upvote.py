"""Upvote use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.pipeline import VoteEventPipeline
from forum.application.usecase.base import BaseUseCase
from forum.domain.value import UserId, VotableType, VoteValue


class UpvoteRequest(BaseModel):
    """Upvote request."""

    votable_type: VotableType
    votable_id: str  # UUID string
    user_id: str  # User ID from authenticated user


class VoteAcceptedResponse(BaseModel):
    """Vote intent accepted for asynchronous processing."""

    votable_type: VotableType
    votable_id: str
    vote_value: int
    accepted: bool = True


class UpvoteUseCase(BaseUseCase):
    """Use case for upvoting a post or comment.

    The vote is applied asynchronously by the vote pipeline; the response
    only confirms the intent was accepted.
    """

    def __init__(self, vote_pipeline: VoteEventPipeline) -> None:
        """Initialize upvote use case.

        Args:
            vote_pipeline: Vote event pipeline
        """
        self.vote_pipeline = vote_pipeline

    async def execute(self, request: UpvoteRequest) -> VoteAcceptedResponse:
        intent = await self.vote_pipeline.submit(
            subject_id=UUID(request.votable_id),
            subject_kind=request.votable_type,
            user_id=UserId(UUID(request.user_id)),
            vote_value=VoteValue.UP,
        )
        return VoteAcceptedResponse(
            votable_type=intent.subject_kind,
            votable_id=str(intent.subject_id),
            vote_value=int(intent.vote_value),
        )
