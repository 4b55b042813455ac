"""Comment domain service."""

import json

import logfire

from forum.domain.error import ContentDeletedException, NotFoundError, ValidationError
from forum.domain.model.comment import Comment
from forum.domain.model.post import summarize
from forum.domain.repository import CommentRepository, PostRepository
from forum.domain.value import CommentId, PostId

from .base import Service
from .notification_service import NotificationService
from .post_service import normalize_paging


class CommentService(Service):
    """Domain service for comment operations."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        post_repository: PostRepository,
        notification_service: NotificationService,
    ) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
            post_repository: Post repository
            notification_service: Reply notifications
        """
        self.comment_repository = comment_repository
        self.post_repository = post_repository
        self.notification_service = notification_service

    async def create_comment(self, comment: Comment) -> Comment:
        """Persist a comment and notify the author it replies to.

        A reply notifies the parent comment's author; a top-level comment
        notifies the post author. Nobody is notified about their own comment.

        Args:
            comment: Comment to create

        Returns:
            Saved comment

        Raises:
            NotFoundError: If the post or parent comment doesn't exist
            ContentDeletedException: If the post was deleted
            ValidationError: If the parent belongs to another post
        """
        with logfire.span(
            "comment_service.create_comment",
            post_id=str(comment.post_id),
            parent_id=str(comment.parent_id) if comment.parent_id else None,
        ):
            post = await self.post_repository.find_by_id(comment.post_id)
            if post is None:
                raise NotFoundError("Post", str(comment.post_id))
            if post.deleted_at is not None:
                raise ContentDeletedException("post", str(comment.post_id))

            recipient_id = post.author_id
            if comment.parent_id is not None:
                parent = await self.comment_repository.find_by_id(comment.parent_id)
                if parent is None:
                    raise NotFoundError("Comment", str(comment.parent_id))
                if parent.post_id != comment.post_id:
                    raise ValidationError("Parent comment belongs to a different post")
                recipient_id = parent.author_id

            saved = await self.comment_repository.save(comment)
            await self.post_repository.increment_comment_count(comment.post_id)
            logfire.info("Comment created", comment_id=str(saved.id))

            payload = json.dumps(
                {
                    "post_id": str(saved.post_id),
                    "comment_id": str(saved.id),
                    "author_name": saved.author_name,
                    "content": summarize(saved.content),
                }
            )
            await self.notification_service.notify_comment(
                recipient_id, saved.author_id, payload
            )
            return saved

    async def list_comments(
        self, post_id: PostId, page: int, page_size: int
    ) -> list[Comment]:
        """List one page of a post's top-level comments, newest first.

        Raises:
            NotFoundError: If the post doesn't exist or was deleted
        """
        post = await self.post_repository.find_by_id(post_id)
        if post is None or post.deleted_at is not None:
            raise NotFoundError("Post", str(post_id))

        page, page_size = normalize_paging(page, page_size)
        return await self.comment_repository.find_by_post(
            post_id, parent_id=None, limit=page_size, offset=(page - 1) * page_size
        )

    async def list_replies(
        self, comment_id: CommentId, page: int, page_size: int
    ) -> list[Comment]:
        """List one page of direct replies to a comment, newest first.

        Raises:
            NotFoundError: If the comment doesn't exist or was deleted
        """
        parent = await self.comment_repository.find_by_id(comment_id)
        if parent is None or parent.deleted_at is not None:
            raise NotFoundError("Comment", str(comment_id))

        page, page_size = normalize_paging(page, page_size)
        return await self.comment_repository.find_by_post(
            parent.post_id,
            parent_id=parent.id,
            limit=page_size,
            offset=(page - 1) * page_size,
        )
