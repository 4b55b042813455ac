"""In-memory vote repository for testing."""

from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from forum.domain.model.vote import Vote
from forum.domain.repository.vote import VoteRepository
from forum.domain.value import UserId, VotableType

VoteKey = tuple[UUID, VotableType, UUID]


class InMemoryVoteRepository(VoteRepository):
    """Votes keyed like the unique constraint of the votes table."""

    def __init__(self) -> None:
        self._votes: dict[VoteKey, Vote] = {}

    @staticmethod
    def _key(user_id: UserId, votable_type: VotableType, votable_id: UUID) -> VoteKey:
        return (UUID(str(user_id)), votable_type, UUID(str(votable_id)))

    async def find_by_user_and_votable(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_id: UUID,
    ) -> Optional[Vote]:
        return self._votes.get(self._key(user_id, votable_type, votable_id))

    async def save(self, vote: Vote) -> Vote:
        """Insert a vote.

        Raises:
            IntegrityError: If the user already voted on the item
        """
        key = self._key(vote.user_id, vote.votable_type, vote.votable_id)
        if key in self._votes:
            raise IntegrityError("duplicate key value violates unique_vote", None, Exception())
        self._votes[key] = vote
        return vote

    async def delete_by_user_and_votable(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_id: UUID,
    ) -> bool:
        return self._votes.pop(self._key(user_id, votable_type, votable_id), None) is not None

    async def count_by_votable(self, votable_type: VotableType, votable_id: UUID) -> int:
        target = UUID(str(votable_id))
        return sum(
            1
            for (_, kind, subject_id) in self._votes
            if kind == votable_type and subject_id == target
        )
