"""Post aggregate root and its cached summary."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from forum.domain.model.common import DomainModel, utcnow
from forum.domain.value import CommunityId, PostId, UserId

SUMMARY_MAX_LENGTH = 100


def summarize(content: str, max_length: int = SUMMARY_MAX_LENGTH) -> str:
    """Truncate post content for list views.

    Counts characters (not bytes) and appends "..." when truncated.
    """
    if len(content) <= max_length:
        return content
    return content[:max_length] + "..."


class PostSummary(DomainModel):
    """Cached representation of a post for list views."""

    post_id: PostId
    title: str
    author_id: UserId
    author_name: str
    community_id: CommunityId
    community_name: str
    summary: str = ""


class Post(DomainModel):
    """Post aggregate root.

    The system of record for a post. Vote counts are mutated only through
    SQL-level increments by the vote pipeline, never by saving the model.
    """

    id: PostId
    title: str = Field(min_length=1, max_length=300)
    content: str = Field(default="", max_length=20000)
    author_id: UserId
    author_name: str
    community_id: CommunityId
    community_name: str
    vote_count: int = Field(default=0, ge=0)
    comment_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    deleted_at: Optional[datetime] = None

    @property
    def summary(self) -> str:
        return summarize(self.content)

    def to_summary(self) -> PostSummary:
        """Build the cached list-view representation."""
        return PostSummary(
            post_id=self.id,
            title=self.title,
            author_id=self.author_id,
            author_name=self.author_name,
            community_id=self.community_id,
            community_name=self.community_name,
            summary=self.summary,
        )
