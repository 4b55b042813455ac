"""Post domain service."""

import asyncio
from functools import partial

import logfire

from forum.config import CacheSettings
from forum.domain.cache import RankingCache
from forum.domain.error import ContentDeletedException, NotAuthorizedError, NotFoundError
from forum.domain.model.post import Post, PostSummary
from forum.domain.repository import PostRepository
from forum.domain.value import CommunityId, PostId, RankingOrder, UserId
from forum.util.coalescer import KeyedRequestCoalescer, make_key
from forum.util.tasks import BackgroundTaskPool

from .base import Service

DEFAULT_PAGE_SIZE = 10


def normalize_paging(page: int, page_size: int) -> tuple[int, int]:
    """Map non-positive paging to the first page and the default size."""
    return (page if page > 0 else 1, page_size if page_size > 0 else DEFAULT_PAGE_SIZE)


class PostService(Service):
    """Domain service for post operations.

    Keeps the ranking cache in step with the post table: new posts are
    indexed, updated posts are invalidated twice around the write, deleted
    posts are dropped from the indexes.
    """

    def __init__(
        self,
        post_repository: PostRepository,
        ranking_cache: RankingCache,
        coalescer: KeyedRequestCoalescer,
        task_pool: BackgroundTaskPool,
        cache_settings: CacheSettings,
    ) -> None:
        """Initialize post service.

        Args:
            post_repository: Post repository
            ranking_cache: Summary and ranking cache
            coalescer: Shared request coalescer
            task_pool: Background task pool for deferred cache work
            cache_settings: Cache configuration
        """
        self.post_repository = post_repository
        self.ranking_cache = ranking_cache
        self.coalescer = coalescer
        self.task_pool = task_pool
        self.cache_settings = cache_settings

    async def create_post(self, post: Post) -> Post:
        """Persist a new post and index it in the ranking cache.

        Args:
            post: Post to create

        Returns:
            Saved post
        """
        with logfire.span("post_service.create_post", post_id=str(post.id)):
            saved = await self.post_repository.save(post)
            await self.ranking_cache.record_new_post(saved.to_summary(), saved.created_at)
            logfire.info("Post created", post_id=str(saved.id), author_id=str(saved.author_id))
            return saved

    async def get_post(self, post_id: PostId) -> Post:
        """Get a live post by ID.

        Raises:
            NotFoundError: If the post doesn't exist or was deleted
        """
        post = await self.post_repository.find_by_id(post_id)
        if post is None or post.deleted_at is not None:
            raise NotFoundError("Post", str(post_id))
        return post

    async def list_posts(
        self, order: RankingOrder, page: int, page_size: int
    ) -> list[PostSummary]:
        """List one page of post summaries, cache first.

        Concurrent identical listings share one lookup. Summaries missing from
        the cache are read from the database and written back in the
        background.

        Args:
            order: Ranking to list by
            page: 1-based page (values below 1 mean the first page)
            page_size: Posts per page (values below 1 mean the default)

        Returns:
            Summaries in ranking order
        """
        page, page_size = normalize_paging(page, page_size)
        key = make_key("post_list", order.value, page, page_size)
        return await self.coalescer.do(
            key, partial(self._load_page, order, page, page_size)
        )

    async def list_community_posts(
        self, community_id: CommunityId, page: int, page_size: int
    ) -> list[PostSummary]:
        """List one page of a community's live posts, newest first.

        Read from the database; the ranking cache only indexes the global
        listings.

        Args:
            community_id: Community to list
            page: 1-based page (values below 1 mean the first page)
            page_size: Posts per page (values below 1 mean the default)

        Returns:
            Summaries, newest first
        """
        page, page_size = normalize_paging(page, page_size)
        with logfire.span(
            "post_service.list_community_posts",
            community_id=str(community_id),
            page=page,
            page_size=page_size,
        ):
            posts = await self.post_repository.find_by_community(
                community_id, limit=page_size, offset=(page - 1) * page_size
            )
            return [post.to_summary() for post in posts]

    async def _load_page(
        self, order: RankingOrder, page: int, page_size: int
    ) -> list[PostSummary]:
        with logfire.span(
            "post_service.list_posts", order=order.value, page=page, page_size=page_size
        ):
            post_ids = await self.ranking_cache.list_ids(order, page, page_size)
            if not post_ids:
                return []

            cached, missing = await self.ranking_cache.fetch_summaries(post_ids)
            by_id = {summary.post_id: summary for summary in cached}

            if missing:
                logfire.info(
                    "Post summaries missing from cache",
                    missing=len(missing),
                    requested=len(post_ids),
                )
                for post in await self.post_repository.find_by_ids(missing):
                    summary = post.to_summary()
                    by_id[post.id] = summary
                    await self.task_pool.submit(
                        partial(self.ranking_cache.store_summary, summary)
                    )

            # IDs with neither a summary nor a live row were deleted concurrently
            return [by_id[post_id] for post_id in post_ids if post_id in by_id]

    async def update_content(self, post_id: PostId, user_id: UserId, content: str) -> Post:
        """Update a post's content with a delayed double delete of its summary.

        The summary is invalidated before the write and again after
        ``delayed_delete_seconds``, so a reader that refilled the cache from a
        pre-write snapshot in between cannot leave a stale summary behind.

        Args:
            post_id: Post ID
            user_id: Editing user (must be the author)
            content: New content

        Returns:
            Updated post

        Raises:
            NotFoundError: If the post doesn't exist
            ContentDeletedException: If the post was deleted
            NotAuthorizedError: If the user is not the author
        """
        with logfire.span("post_service.update_content", post_id=str(post_id)):
            post = await self._get_editable(post_id, user_id)

            await self.ranking_cache.invalidate(post.id)

            updated = await self.post_repository.update_content(post.id, content)
            if updated is None:
                raise ContentDeletedException("post", str(post_id))

            self.task_pool.submit_later(
                self.cache_settings.delayed_delete_seconds,
                partial(self._delayed_invalidate, post.id),
            )

            logfire.info("Post content updated", post_id=str(post_id))
            return updated

    async def _delayed_invalidate(self, post_id: PostId) -> None:
        try:
            await asyncio.wait_for(
                self.ranking_cache.invalidate(post_id),
                self.cache_settings.delayed_delete_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logfire.error("Delayed cache invalidation timed out", post_id=str(post_id))
            return
        logfire.debug("Delayed cache invalidation done", post_id=str(post_id))

    async def delete_post(self, post_id: PostId, user_id: UserId) -> None:
        """Soft delete a post and drop it from the ranking cache.

        Raises:
            NotFoundError: If the post doesn't exist
            ContentDeletedException: If the post was already deleted
            NotAuthorizedError: If the user is not the author
        """
        with logfire.span("post_service.delete_post", post_id=str(post_id)):
            post = await self._get_editable(post_id, user_id)

            if not await self.post_repository.soft_delete(post.id):
                raise ContentDeletedException("post", str(post_id))

            await self.ranking_cache.remove(post.id)
            logfire.info("Post deleted", post_id=str(post_id))

    async def _get_editable(self, post_id: PostId, user_id: UserId) -> Post:
        post = await self.post_repository.find_by_id(post_id)
        if post is None:
            raise NotFoundError("Post", str(post_id))
        if post.deleted_at is not None:
            raise ContentDeletedException("post", str(post_id))
        if post.author_id != user_id:
            raise NotAuthorizedError("post", str(post_id), str(user_id))
        return post
