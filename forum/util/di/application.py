"""Application layer DI providers."""

from collections.abc import AsyncIterator

from dishka import AsyncContainer, Scope, provide

from forum.application.pipeline import VoteEventPipeline, VoteTransport
from forum.application.usecase.auth import GetCurrentUserUseCase, LogoutUseCase
from forum.application.usecase.comment import (
    CreateCommentUseCase,
    ListCommentsUseCase,
    ListRepliesUseCase,
)
from forum.application.usecase.post import (
    CreatePostUseCase,
    DeletePostUseCase,
    GetPostUseCase,
    ListCommunityPostsUseCase,
    ListPostsUseCase,
    UpdatePostUseCase,
)
from forum.application.usecase.vote import (
    GetVoteCountUseCase,
    RemoveVoteUseCase,
    UpvoteUseCase,
)
from forum.config import MessagingSettings, PipelineSettings
from forum.domain.cache import RankingCache
from forum.domain.service import (
    CommentService,
    JWTService,
    NotificationService,
    PostService,
)
from forum.util.coalescer import KeyedRequestCoalescer
from forum.util.di.base import ProviderBase
from forum.util.tasks import BackgroundTaskPool


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Vote pipeline
    @provide(scope=Scope.APP)
    async def get_vote_pipeline(
        self,
        container: AsyncContainer,
        transport: VoteTransport,
        ranking_cache: RankingCache,
        notification_service: NotificationService,
        coalescer: KeyedRequestCoalescer,
        task_pool: BackgroundTaskPool,
        messaging_settings: MessagingSettings,
        pipeline_settings: PipelineSettings,
    ) -> AsyncIterator[VoteEventPipeline]:
        """Provide the vote pipeline; its workers are stopped on shutdown.

        Workers are started by the application lifespan, not here.
        """
        pipeline = VoteEventPipeline(
            container=container,
            transport=transport,
            ranking_cache=ranking_cache,
            notification_service=notification_service,
            coalescer=coalescer,
            task_pool=task_pool,
            messaging_settings=messaging_settings,
            pipeline_settings=pipeline_settings,
        )
        yield pipeline
        await pipeline.stop()

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_current_user_use_case(self, jwt_service: JWTService) -> GetCurrentUserUseCase:
        """Provide get current user use case."""
        return GetCurrentUserUseCase(jwt_service=jwt_service)

    @provide(scope=Scope.REQUEST)
    def get_logout_use_case(self, jwt_service: JWTService) -> LogoutUseCase:
        """Provide logout use case."""
        return LogoutUseCase(jwt_service=jwt_service)

    # Post use cases
    @provide(scope=Scope.REQUEST)
    def get_create_post_use_case(self, post_service: PostService) -> CreatePostUseCase:
        """Provide create post use case."""
        return CreatePostUseCase(post_service=post_service)

    @provide(scope=Scope.REQUEST)
    def get_get_post_use_case(self, post_service: PostService) -> GetPostUseCase:
        """Provide get post use case."""
        return GetPostUseCase(post_service=post_service)

    @provide(scope=Scope.REQUEST)
    def get_list_posts_use_case(self, post_service: PostService) -> ListPostsUseCase:
        """Provide list posts use case."""
        return ListPostsUseCase(post_service=post_service)

    @provide(scope=Scope.REQUEST)
    def get_list_community_posts_use_case(
        self, post_service: PostService
    ) -> ListCommunityPostsUseCase:
        """Provide list community posts use case."""
        return ListCommunityPostsUseCase(post_service=post_service)

    @provide(scope=Scope.REQUEST)
    def get_update_post_use_case(self, post_service: PostService) -> UpdatePostUseCase:
        """Provide update post use case."""
        return UpdatePostUseCase(post_service=post_service)

    @provide(scope=Scope.REQUEST)
    def get_delete_post_use_case(self, post_service: PostService) -> DeletePostUseCase:
        """Provide delete post use case."""
        return DeletePostUseCase(post_service=post_service)

    # Comment use cases
    @provide(scope=Scope.REQUEST)
    def get_create_comment_use_case(
        self, comment_service: CommentService
    ) -> CreateCommentUseCase:
        """Provide create comment use case."""
        return CreateCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_list_comments_use_case(
        self, comment_service: CommentService
    ) -> ListCommentsUseCase:
        """Provide list comments use case."""
        return ListCommentsUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_list_replies_use_case(
        self, comment_service: CommentService
    ) -> ListRepliesUseCase:
        """Provide list replies use case."""
        return ListRepliesUseCase(comment_service=comment_service)

    # Vote use cases
    @provide(scope=Scope.REQUEST)
    def get_upvote_use_case(self, vote_pipeline: VoteEventPipeline) -> UpvoteUseCase:
        """Provide upvote use case."""
        return UpvoteUseCase(vote_pipeline=vote_pipeline)

    @provide(scope=Scope.REQUEST)
    def get_remove_vote_use_case(
        self, vote_pipeline: VoteEventPipeline
    ) -> RemoveVoteUseCase:
        """Provide remove vote use case."""
        return RemoveVoteUseCase(vote_pipeline=vote_pipeline)

    @provide(scope=Scope.REQUEST)
    def get_vote_count_use_case(
        self, vote_pipeline: VoteEventPipeline
    ) -> GetVoteCountUseCase:
        """Provide get vote count use case."""
        return GetVoteCountUseCase(vote_pipeline=vote_pipeline)
