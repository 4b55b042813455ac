"""Get vote count use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.pipeline import VoteEventPipeline
from forum.domain.value import VotableType


class GetVoteCountRequest(BaseModel):
    """Get vote count request."""

    votable_type: VotableType
    votable_id: str  # UUID string


class GetVoteCountResponse(BaseModel):
    """Get vote count response."""

    votable_type: VotableType
    votable_id: str
    vote_count: int


class GetVoteCountUseCase:
    """Use case for reading the vote count of a post or comment."""

    def __init__(self, vote_pipeline: VoteEventPipeline) -> None:
        self.vote_pipeline = vote_pipeline

    async def execute(self, request: GetVoteCountRequest) -> GetVoteCountResponse:
        """Read the count.

        Raises:
            NotFoundError: If the item doesn't exist
        """
        count = await self.vote_pipeline.get_vote_count(
            request.votable_type, UUID(request.votable_id)
        )
        return GetVoteCountResponse(
            votable_type=request.votable_type,
            votable_id=request.votable_id,
            vote_count=count,
        )
