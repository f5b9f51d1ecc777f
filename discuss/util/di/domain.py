"""Domain layer DI providers."""

from dishka import Scope, provide

from discuss.domain.repository import CommentRepository
from discuss.domain.service import CommentService
from discuss.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Services are APP-scoped: they hold no per-call state and share the
    application's single repository.
    """

    scope = Scope.APP

    @provide
    def get_comment_service(
        self, comment_repository: CommentRepository
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(comment_repository=comment_repository)
