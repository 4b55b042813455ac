"""Vote entity and the messages of the vote pipeline."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import Field

from forum.domain.model.common import DomainModel, utcnow
from forum.domain.value import UserId, VotableType, VoteId, VoteValue


class Vote(DomainModel):
    """Vote entity.

    Business rules:
    - One vote per user per item (enforced by database unique constraint)
    - Only upvotes are stored; removing a vote deletes the row
    """

    id: VoteId
    user_id: UserId
    votable_type: VotableType
    votable_id: UUID  # PostId or CommentId
    created_at: datetime = Field(default_factory=utcnow)


class VoteIntent(DomainModel):
    """A pending, not yet persisted request to change a vote.

    Serialized as JSON onto the vote transport.
    """

    subject_id: UUID
    subject_kind: VotableType
    user_id: UserId
    vote_value: VoteValue

    @property
    def delta(self) -> int:
        """Change this intent applies to the subject's vote counter."""
        return 1 if self.vote_value.is_upvote else -1


class VoteOutcome(DomainModel):
    """Result of persisting a vote intent."""

    intent: VoteIntent
    author_id: UserId
    subject_created_at: datetime
    previous_count: int
    vote_count: int


class VoteIntentState(str, Enum):
    """Lifecycle of a vote intent in the pipeline."""

    SUBMITTED = "submitted"
    ENQUEUED = "enqueued"
    PERSISTING = "persisting"
    SCORE_UPDATING = "score_updating"
    NOTIFYING = "notifying"
    DONE = "done"
    FAILED = "failed"
