"""Notification messages delivered over persistent connections."""

from typing import Optional

from pydantic import Field

from forum.domain.model.common import DomainModel
from forum.domain.value import MessageKind


class NotificationMessage(DomainModel):
    """Message routed to a single recipient.

    User IDs are kept as strings: they arrive from clients as JSON and are
    used as connection map keys.
    """

    kind: MessageKind
    from_user_id: str = ""
    to_user_id: str = ""
    payload: Optional[str] = None


class MailboxEntry(DomainModel):
    """Offline message together with when it was buffered."""

    message: NotificationMessage
    enqueued_at: float = Field(ge=0)
