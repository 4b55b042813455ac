"""Notification domain service."""

import json
from abc import ABC, abstractmethod

import logfire

from forum.domain.model.notification import NotificationMessage
from forum.domain.model.vote import VoteOutcome
from forum.domain.value import MessageKind, UserId

from .base import Service


class NotificationSender(ABC):
    """Delivers messages to currently connected users."""

    @abstractmethod
    async def send_to_user(self, message: NotificationMessage) -> bool:
        """Deliver a message if the recipient is connected.

        Returns:
            True if delivered to a live connection, False if the recipient is
            offline (the message is dropped)
        """
        pass


class NotificationService(Service):
    """Builds and sends best-effort user notifications.

    Notification failures never fail the operation that triggered them.
    """

    def __init__(self, sender: NotificationSender) -> None:
        """Initialize notification service.

        Args:
            sender: Delivery channel for live users
        """
        self.sender = sender

    async def notify_vote(self, outcome: VoteOutcome) -> bool:
        """Tell the author of a voted item about a new upvote.

        Unvotes and self-votes are not notified.

        Args:
            outcome: Persisted vote

        Returns:
            True if a notification was delivered
        """
        intent = outcome.intent
        if not intent.vote_value.is_upvote or intent.user_id == outcome.author_id:
            return False

        payload = json.dumps(
            {
                "subject_kind": intent.subject_kind.value,
                "subject_id": str(intent.subject_id),
                "vote_count": outcome.vote_count,
            }
        )
        return await self._send(
            NotificationMessage(
                kind=MessageKind.VOTE,
                from_user_id=str(intent.user_id),
                to_user_id=str(outcome.author_id),
                payload=payload,
            )
        )

    async def notify_comment(
        self, recipient_id: UserId, commenter_id: UserId, payload: str
    ) -> bool:
        """Tell a user someone replied to them.

        Args:
            recipient_id: Author of the post or parent comment
            commenter_id: Author of the new comment
            payload: Message body

        Returns:
            True if a notification was delivered
        """
        if recipient_id == commenter_id:
            return False

        return await self._send(
            NotificationMessage(
                kind=MessageKind.COMMENT,
                from_user_id=str(commenter_id),
                to_user_id=str(recipient_id),
                payload=payload,
            )
        )

    async def _send(self, message: NotificationMessage) -> bool:
        try:
            delivered = await self.sender.send_to_user(message)
        except Exception as e:
            logfire.error(
                "Notification failed",
                kind=message.kind.value,
                to_user_id=message.to_user_id,
                error=str(e),
            )
            return False

        logfire.debug(
            "Notification sent" if delivered else "Notification dropped, user offline",
            kind=message.kind.value,
            to_user_id=message.to_user_id,
        )
        return delivered
