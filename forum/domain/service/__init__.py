"""Domain services."""

from .base import Service
from .comment_service import CommentService
from .jwt_service import JWTService
from .notification_service import NotificationSender, NotificationService
from .post_service import PostService
from .vote_service import VoteService

__all__ = [
    "CommentService",
    "JWTService",
    "NotificationSender",
    "NotificationService",
    "PostService",
    "Service",
    "VoteService",
]
