"""Domain layer DI providers."""

from dishka import Scope, provide

from forum.config import AuthSettings, CacheSettings
from forum.domain.cache import RankingCache, TokenBlacklist
from forum.domain.repository import CommentRepository, PostRepository, VoteRepository
from forum.domain.service import (
    CommentService,
    JWTService,
    NotificationSender,
    NotificationService,
    PostService,
    VoteService,
)
from forum.util.coalescer import KeyedRequestCoalescer
from forum.util.di.base import ProviderBase
from forum.util.tasks import BackgroundTaskPool


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Services that touch repositories are REQUEST-scoped to align with the
    repository/session lifecycle: each request (or each vote intent) gets
    fresh service instances with their own transaction. Stateless services
    built only from app-wide dependencies are APP-scoped so the websocket
    endpoint and background workers can use them outside a request.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_jwt_service(
        self, auth_settings: AuthSettings, token_blacklist: TokenBlacklist
    ) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings, token_blacklist=token_blacklist)

    @provide(scope=Scope.APP)
    def get_notification_service(self, sender: NotificationSender) -> NotificationService:
        """Provide notification domain service."""
        return NotificationService(sender=sender)

    @provide
    def get_post_service(
        self,
        post_repository: PostRepository,
        ranking_cache: RankingCache,
        coalescer: KeyedRequestCoalescer,
        task_pool: BackgroundTaskPool,
        cache_settings: CacheSettings,
    ) -> PostService:
        """Provide post domain service."""
        return PostService(
            post_repository=post_repository,
            ranking_cache=ranking_cache,
            coalescer=coalescer,
            task_pool=task_pool,
            cache_settings=cache_settings,
        )

    @provide
    def get_vote_service(
        self,
        vote_repository: VoteRepository,
        post_repository: PostRepository,
        comment_repository: CommentRepository,
    ) -> VoteService:
        """Provide vote domain service."""
        return VoteService(
            vote_repository=vote_repository,
            post_repository=post_repository,
            comment_repository=comment_repository,
        )

    @provide
    def get_comment_service(
        self,
        comment_repository: CommentRepository,
        post_repository: PostRepository,
        notification_service: NotificationService,
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(
            comment_repository=comment_repository,
            post_repository=post_repository,
            notification_service=notification_service,
        )
