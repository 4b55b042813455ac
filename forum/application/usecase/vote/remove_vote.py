"""Remove vote use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.pipeline import VoteEventPipeline
from forum.application.usecase.base import BaseUseCase
from forum.domain.value import UserId, VotableType, VoteValue

from .upvote import VoteAcceptedResponse


class RemoveVoteRequest(BaseModel):
    """Remove vote request."""

    votable_type: VotableType
    votable_id: str  # UUID string
    user_id: str  # User ID from authenticated user


class RemoveVoteUseCase(BaseUseCase):
    """Use case for removing a vote from a post or comment."""

    def __init__(self, vote_pipeline: VoteEventPipeline) -> None:
        """Initialize remove vote use case.

        Args:
            vote_pipeline: Vote event pipeline
        """
        self.vote_pipeline = vote_pipeline

    async def execute(self, request: RemoveVoteRequest) -> VoteAcceptedResponse:
        intent = await self.vote_pipeline.submit(
            subject_id=UUID(request.votable_id),
            subject_kind=request.votable_type,
            user_id=UserId(UUID(request.user_id)),
            vote_value=VoteValue.NONE,
        )
        return VoteAcceptedResponse(
            votable_type=intent.subject_kind,
            votable_id=str(intent.subject_id),
            vote_value=int(intent.vote_value),
        )
