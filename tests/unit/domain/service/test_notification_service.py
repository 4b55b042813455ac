"""Unit tests for NotificationService."""

import json
from uuid import uuid4

import pytest

from forum.domain.model.notification import NotificationMessage
from forum.domain.model.vote import VoteIntent, VoteOutcome
from forum.domain.service import NotificationSender, NotificationService
from forum.domain.value import MessageKind, UserId, VotableType, VoteValue
from forum.domain.model.common import utcnow


class RecordingSender(NotificationSender):
    def __init__(self, online: bool = True, fail: bool = False) -> None:
        self.sent: list[NotificationMessage] = []
        self.online = online
        self.fail = fail

    async def send_to_user(self, message: NotificationMessage) -> bool:
        if self.fail:
            raise RuntimeError("socket exploded")
        self.sent.append(message)
        return self.online


def outcome(value: VoteValue, voter: UserId, author: UserId) -> VoteOutcome:
    intent = VoteIntent(
        subject_id=uuid4(),
        subject_kind=VotableType.POST,
        user_id=voter,
        vote_value=value,
    )
    return VoteOutcome(
        intent=intent,
        author_id=author,
        subject_created_at=utcnow(),
        previous_count=0,
        vote_count=1,
    )


class TestNotifyVote:
    """Tests for notify_vote."""

    @pytest.mark.asyncio
    async def test_upvote_notifies_author(self):
        # Arrange
        sender = RecordingSender()
        service = NotificationService(sender)
        voter, author = UserId(uuid4()), UserId(uuid4())
        result = outcome(VoteValue.UP, voter, author)

        # Act
        delivered = await service.notify_vote(result)

        # Assert
        assert delivered is True
        [message] = sender.sent
        assert message.kind == MessageKind.VOTE
        assert message.to_user_id == str(author)
        assert json.loads(message.payload) == {
            "subject_kind": "post",
            "subject_id": str(result.intent.subject_id),
            "vote_count": 1,
        }

    @pytest.mark.asyncio
    async def test_unvote_is_silent(self):
        sender = RecordingSender()
        service = NotificationService(sender)

        delivered = await service.notify_vote(
            outcome(VoteValue.NONE, UserId(uuid4()), UserId(uuid4()))
        )

        assert delivered is False
        assert sender.sent == []

    @pytest.mark.asyncio
    async def test_self_vote_is_silent(self):
        sender = RecordingSender()
        service = NotificationService(sender)
        user = UserId(uuid4())

        assert await service.notify_vote(outcome(VoteValue.UP, user, user)) is False
        assert sender.sent == []

    @pytest.mark.asyncio
    async def test_sender_failure_is_swallowed(self):
        """A broken delivery never fails the vote that triggered it."""
        service = NotificationService(RecordingSender(fail=True))

        delivered = await service.notify_vote(
            outcome(VoteValue.UP, UserId(uuid4()), UserId(uuid4()))
        )

        assert delivered is False


class TestNotifyComment:
    """Tests for notify_comment."""

    @pytest.mark.asyncio
    async def test_offline_recipient_returns_false(self):
        sender = RecordingSender(online=False)
        service = NotificationService(sender)

        delivered = await service.notify_comment(
            UserId(uuid4()), UserId(uuid4()), '{"comment_id": "c"}'
        )

        assert delivered is False
        assert len(sender.sent) == 1
