"""Get comments use case."""

from pydantic import BaseModel

from discuss.application.cache import CommentCache
from discuss.domain.model.comment import Comment
from discuss.domain.service import CommentService
from discuss.domain.value import LessonId

from discuss.application.usecase.base import BaseUseCase


class GetCommentsRequest(BaseModel):
    """Get comments request."""

    lesson_id: str


class GetCommentsResponse(BaseModel):
    """Get comments response."""

    lesson_id: str
    comments: tuple[Comment, ...]
    total: int


class GetCommentsUseCase(BaseUseCase):
    """Use case for (re)loading a lesson's comment tree into the cache.

    Also serves as the settle refresh after comment and reply mutations.
    """

    def __init__(
        self, comment_service: CommentService, comment_cache: CommentCache
    ) -> None:
        """Initialize get comments use case.

        Args:
            comment_service: Comment domain service
            comment_cache: Cache of comment trees per lesson
        """
        self.comment_service = comment_service
        self.comment_cache = comment_cache

    async def execute(self, request: GetCommentsRequest) -> GetCommentsResponse:
        """Fetch the tree from the server and publish it to the cache.

        Args:
            request: Lesson to load

        Returns:
            The freshly fetched tree
        """
        lesson_id = LessonId(request.lesson_id)

        comments = await self.comment_service.list_comments(lesson_id)
        self.comment_cache.cell(lesson_id).set(comments)

        return GetCommentsResponse(
            lesson_id=request.lesson_id,
            comments=comments,
            total=len(comments),
        )
