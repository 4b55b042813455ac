"""Comment entity.

Comments are nested replies on posts. Only the fields the vote pipeline and
reply notifications need are modelled here.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from forum.domain.model.common import DomainModel, utcnow
from forum.domain.value import CommentId, PostId, UserId


class Comment(DomainModel):
    """Comment entity.

    - parent_id: Direct parent comment (None for top-level comments)
    """

    id: CommentId
    post_id: PostId
    author_id: UserId
    author_name: str
    content: str = Field(min_length=1, max_length=10000)
    parent_id: Optional[CommentId] = None
    vote_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utcnow)
    deleted_at: Optional[datetime] = None
