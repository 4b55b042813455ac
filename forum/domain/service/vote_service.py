"""Vote domain service."""

from uuid import uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from forum.domain.error import (
    ContentDeletedException,
    DuplicateVoteError,
    NotFoundError,
    VoteNotFoundError,
)
from forum.domain.model.vote import Vote, VoteIntent, VoteOutcome
from forum.domain.repository import CommentRepository, PostRepository, VoteRepository
from forum.domain.value import CommentId, PostId, VotableType, VoteId

from .base import Service


class VoteService(Service):
    """Domain service for vote persistence.

    Runs inside one database transaction per intent: the vote row and the
    subject's counter change together, and the count read back reflects both.
    """

    def __init__(
        self,
        vote_repository: VoteRepository,
        post_repository: PostRepository,
        comment_repository: CommentRepository,
    ) -> None:
        """Initialize vote service.

        Args:
            vote_repository: Vote repository
            post_repository: Post repository
            comment_repository: Comment repository
        """
        self.vote_repository = vote_repository
        self.post_repository = post_repository
        self.comment_repository = comment_repository

    async def apply_vote(self, intent: VoteIntent) -> VoteOutcome:
        """Persist a vote intent.

        An upvote inserts the user's vote and increments the subject's count.
        Anything else removes the user's vote and decrements the count.

        Args:
            intent: Vote intent

        Returns:
            Outcome with the count before and after the change

        Raises:
            NotFoundError: If the subject doesn't exist
            ContentDeletedException: If the subject was deleted
            DuplicateVoteError: If upvoting twice
            VoteNotFoundError: If removing a vote that doesn't exist
        """
        with logfire.span(
            "vote_service.apply_vote",
            subject_kind=intent.subject_kind.value,
            subject_id=str(intent.subject_id),
            user_id=str(intent.user_id),
            vote_value=int(intent.vote_value),
        ):
            subject = await self._get_subject(intent.subject_kind, intent.subject_id)

            if intent.vote_value.is_upvote:
                vote = Vote(
                    id=VoteId(uuid4()),
                    user_id=intent.user_id,
                    votable_type=intent.subject_kind,
                    votable_id=intent.subject_id,
                )
                try:
                    await self.vote_repository.save(vote)
                except IntegrityError:
                    logfire.warn(
                        "Duplicate vote attempt",
                        user_id=str(intent.user_id),
                        subject_id=str(intent.subject_id),
                    )
                    raise DuplicateVoteError(
                        intent.subject_kind.value, str(intent.subject_id), str(intent.user_id)
                    )
                await self._increment(intent.subject_kind, intent.subject_id)
            else:
                deleted = await self.vote_repository.delete_by_user_and_votable(
                    user_id=intent.user_id,
                    votable_type=intent.subject_kind,
                    votable_id=intent.subject_id,
                )
                if not deleted:
                    raise VoteNotFoundError(
                        intent.subject_kind.value, str(intent.subject_id), str(intent.user_id)
                    )
                await self._decrement(intent.subject_kind, intent.subject_id)

            vote_count = await self.get_vote_count(intent.subject_kind, intent.subject_id)

            logfire.info(
                "Vote persisted",
                subject_id=str(intent.subject_id),
                vote_count=vote_count,
            )
            return VoteOutcome(
                intent=intent,
                author_id=subject.author_id,
                subject_created_at=subject.created_at,
                previous_count=vote_count - intent.delta,
                vote_count=vote_count,
            )

    async def get_vote_count(self, subject_kind: VotableType, subject_id) -> int:
        """Read the vote count of a post or comment.

        Raises:
            NotFoundError: If the subject doesn't exist
        """
        if subject_kind == VotableType.POST:
            count = await self.post_repository.get_vote_count(PostId(subject_id))
        else:
            count = await self.comment_repository.get_vote_count(CommentId(subject_id))

        if count is None:
            raise NotFoundError(subject_kind.value.capitalize(), str(subject_id))
        return count

    async def _get_subject(self, subject_kind: VotableType, subject_id):
        if subject_kind == VotableType.POST:
            subject = await self.post_repository.find_by_id(PostId(subject_id))
        else:
            subject = await self.comment_repository.find_by_id(CommentId(subject_id))

        if subject is None:
            logfire.warn("Vote on non-existent subject", subject_id=str(subject_id))
            raise NotFoundError(subject_kind.value.capitalize(), str(subject_id))
        if subject.deleted_at is not None:
            raise ContentDeletedException(subject_kind.value, str(subject_id))
        return subject

    async def _increment(self, subject_kind: VotableType, subject_id) -> None:
        if subject_kind == VotableType.POST:
            await self.post_repository.increment_votes(PostId(subject_id))
        else:
            await self.comment_repository.increment_votes(CommentId(subject_id))

    async def _decrement(self, subject_kind: VotableType, subject_id) -> None:
        if subject_kind == VotableType.POST:
            await self.post_repository.decrement_votes(PostId(subject_id))
        else:
            await self.comment_repository.decrement_votes(CommentId(subject_id))
