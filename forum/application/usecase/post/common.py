"""Response models shared by post use cases."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from forum.domain.model.post import Post, PostSummary


class PostResponse(BaseModel):
    """Full post."""

    post_id: str
    title: str
    content: str
    author_id: str
    author_name: str
    community_id: str
    community_name: str
    vote_count: int
    comment_count: int
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        return cls(
            post_id=str(post.id),
            title=post.title,
            content=post.content,
            author_id=str(post.author_id),
            author_name=post.author_name,
            community_id=str(post.community_id),
            community_name=post.community_name,
            vote_count=post.vote_count,
            comment_count=post.comment_count,
            created_at=post.created_at,
            updated_at=post.updated_at,
            deleted_at=post.deleted_at,
        )


class PostSummaryResponse(BaseModel):
    """Post as shown in list views."""

    post_id: str
    title: str
    author_id: str
    author_name: str
    community_id: str
    community_name: str
    summary: str

    @classmethod
    def from_summary(cls, summary: PostSummary) -> "PostSummaryResponse":
        return cls(
            post_id=str(summary.post_id),
            title=summary.title,
            author_id=str(summary.author_id),
            author_name=summary.author_name,
            community_id=str(summary.community_id),
            community_name=summary.community_name,
            summary=summary.summary,
        )
