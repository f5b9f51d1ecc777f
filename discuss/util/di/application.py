"""Application layer DI providers."""

from dishka import Scope, provide

from discuss.application.cache import CommentCache, ModerationQueueCache
from discuss.application.usecase.comment import (
    GetCommentsUseCase,
    PostCommentUseCase,
    PostReplyUseCase,
)
from discuss.application.usecase.moderation import (
    GetModerationQueueUseCase,
    ModerateCommentUseCase,
)
from discuss.config import ModerationSettings, ThreadSettings
from discuss.domain.service import CommentService
from discuss.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed.

    Caches live as long as the container so every use case and every
    facade sees the same cells.
    """

    scope = Scope.APP

    # Caches
    @provide
    def get_comment_cache(self) -> CommentCache:
        """Provide the shared comment tree cache."""
        return CommentCache()

    @provide
    def get_moderation_queue_cache(self) -> ModerationQueueCache:
        """Provide the shared moderation queue cache."""
        return ModerationQueueCache()

    # Comment use cases
    @provide
    def get_comments_use_case(
        self, comment_service: CommentService, comment_cache: CommentCache
    ) -> GetCommentsUseCase:
        """Provide get comments use case."""
        return GetCommentsUseCase(
            comment_service=comment_service, comment_cache=comment_cache
        )

    @provide
    def get_post_comment_use_case(
        self,
        comment_service: CommentService,
        comment_cache: CommentCache,
        get_comments_use_case: GetCommentsUseCase,
        thread_settings: ThreadSettings,
    ) -> PostCommentUseCase:
        """Provide post comment use case."""
        return PostCommentUseCase(
            comment_service=comment_service,
            comment_cache=comment_cache,
            get_comments_use_case=get_comments_use_case,
            thread_settings=thread_settings,
        )

    @provide
    def get_post_reply_use_case(
        self,
        comment_service: CommentService,
        comment_cache: CommentCache,
        get_comments_use_case: GetCommentsUseCase,
        thread_settings: ThreadSettings,
    ) -> PostReplyUseCase:
        """Provide post reply use case."""
        return PostReplyUseCase(
            comment_service=comment_service,
            comment_cache=comment_cache,
            get_comments_use_case=get_comments_use_case,
            thread_settings=thread_settings,
        )

    # Moderation use cases
    @provide
    def get_moderation_queue_use_case(
        self,
        comment_service: CommentService,
        queue_cache: ModerationQueueCache,
        moderation_settings: ModerationSettings,
    ) -> GetModerationQueueUseCase:
        """Provide get moderation queue use case."""
        return GetModerationQueueUseCase(
            comment_service=comment_service,
            queue_cache=queue_cache,
            moderation_settings=moderation_settings,
        )

    @provide
    def get_moderate_comment_use_case(
        self,
        comment_service: CommentService,
        queue_cache: ModerationQueueCache,
        comment_cache: CommentCache,
        get_moderation_queue_use_case: GetModerationQueueUseCase,
    ) -> ModerateCommentUseCase:
        """Provide moderate comment use case."""
        return ModerateCommentUseCase(
            comment_service=comment_service,
            queue_cache=queue_cache,
            comment_cache=comment_cache,
            get_moderation_queue_use_case=get_moderation_queue_use_case,
        )
