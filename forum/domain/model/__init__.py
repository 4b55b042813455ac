"""Domain model entities for the forum."""

from forum.domain.model.comment import Comment
from forum.domain.model.notification import MailboxEntry, NotificationMessage
from forum.domain.model.post import Post, PostSummary
from forum.domain.model.vote import Vote, VoteIntent, VoteIntentState, VoteOutcome

__all__ = [
    "Comment",
    "MailboxEntry",
    "NotificationMessage",
    "Post",
    "PostSummary",
    "Vote",
    "VoteIntent",
    "VoteIntentState",
    "VoteOutcome",
]
