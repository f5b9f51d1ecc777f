"""Get moderation queue use case."""

from pydantic import BaseModel, Field

from discuss.application.cache import ModerationQueueCache
from discuss.application.usecase.base import BaseUseCase
from discuss.config import ModerationSettings
from discuss.domain.model.moderation import ModerationQueueItem
from discuss.domain.service import CommentService
from discuss.domain.value import ModerationFilters, ModerationStatus


class GetModerationQueueRequest(BaseModel):
    """Get moderation queue request.

    Unset fields fall back to the configured defaults.
    """

    status: ModerationStatus | None = None
    page: int = Field(default=1, ge=1)
    page_size: int | None = Field(default=None, ge=1, le=100)


class GetModerationQueueResponse(BaseModel):
    """Get moderation queue response."""

    filters: ModerationFilters
    items: tuple[ModerationQueueItem, ...]
    total: int


class GetModerationQueueUseCase(BaseUseCase):
    """Use case for (re)loading the moderation queue into the cache."""

    def __init__(
        self,
        comment_service: CommentService,
        queue_cache: ModerationQueueCache,
        moderation_settings: ModerationSettings,
    ) -> None:
        """Initialize get moderation queue use case.

        Args:
            comment_service: Comment domain service
            queue_cache: Cache of moderation rows per filter set
            moderation_settings: Default status and page size
        """
        self.comment_service = comment_service
        self.queue_cache = queue_cache
        self.moderation_settings = moderation_settings

    def filters_for(self, request: GetModerationQueueRequest) -> ModerationFilters:
        """Resolve request fields against the configured defaults."""
        return ModerationFilters(
            status=request.status or self.moderation_settings.default_status,
            page=request.page,
            page_size=request.page_size or self.moderation_settings.page_size,
        )

    async def execute(
        self, request: GetModerationQueueRequest
    ) -> GetModerationQueueResponse:
        """Fetch rows from the server and publish them to the cache.

        Args:
            request: Status and pagination

        Returns:
            The fetched rows
        """
        filters = self.filters_for(request)

        items = await self.comment_service.list_moderation_queue(filters)
        self.queue_cache.cell(filters).set(items)

        return GetModerationQueueResponse(
            filters=filters, items=items, total=len(items)
        )
