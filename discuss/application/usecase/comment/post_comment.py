"""Post comment use case."""

from datetime import UTC, datetime

import logfire
from pydantic import BaseModel

from discuss.application.cache import CommentCache
from discuss.application.optimistic import run_optimistic
from discuss.application.validation import validate_body
from discuss.config import ThreadSettings
from discuss.domain.model.comment import Comment
from discuss.domain.service import CommentService, insert_comment, replace_comment
from discuss.domain.service.normalization import USER_PLACEHOLDER
from discuss.domain.value import (
    CommentId,
    LessonId,
    ModerationStatus,
    UserId,
    new_provisional_id,
)

from discuss.application.usecase.base import BaseUseCase
from .get_comments import GetCommentsRequest, GetCommentsUseCase


class PostCommentRequest(BaseModel):
    """Post comment request."""

    lesson_id: str
    body: str
    author_id: str | None = None  # Current user, if known


class PostCommentResponse(BaseModel):
    """Post comment response."""

    comment: Comment
    provisional_id: str


class PostCommentUseCase(BaseUseCase):
    """Use case for publishing a root comment optimistically."""

    def __init__(
        self,
        comment_service: CommentService,
        comment_cache: CommentCache,
        get_comments_use_case: GetCommentsUseCase,
        thread_settings: ThreadSettings,
    ) -> None:
        """Initialize post comment use case.

        Args:
            comment_service: Comment domain service
            comment_cache: Cache of comment trees per lesson
            get_comments_use_case: Refresh used to settle the cache
            thread_settings: Body length limit
        """
        self.comment_service = comment_service
        self.comment_cache = comment_cache
        self.get_comments_use_case = get_comments_use_case
        self.thread_settings = thread_settings

    async def execute(self, request: PostCommentRequest) -> PostCommentResponse:
        """Execute post comment flow.

        Steps:
        1. Validate the body (nothing is published if this fails)
        2. Show a provisional pending comment at the top of the lesson
        3. Create the comment on the server
        4. Swap the provisional comment for the server's, or roll back
        5. Refresh the lesson tree

        Args:
            request: Lesson, body and author

        Returns:
            The authoritative comment and the provisional id it replaced

        Raises:
            ValidationError: If the body is blank or too long
            MutationFailedError: If the server call fails
        """
        lesson_id = LessonId(request.lesson_id)
        body = validate_body(request.body, self.thread_settings.max_body_length)

        now = datetime.now(UTC)
        provisional = Comment(
            id=CommentId(new_provisional_id()),
            lesson_id=lesson_id,
            user_id=UserId(request.author_id or USER_PLACEHOLDER),
            body=body.root,
            created_at=now,
            updated_at=now,
            moderation_status=ModerationStatus.PENDING,
        )

        with logfire.span(
            "post_comment",
            lesson_id=lesson_id,
            provisional_id=provisional.id,
        ):
            comment = await run_optimistic(
                self.comment_cache.cell(lesson_id),
                operation="post_comment",
                propose=lambda tree: insert_comment(tree, provisional),
                submit=lambda: self.comment_service.create_comment(lesson_id, body),
                reconcile=lambda tree, created: replace_comment(
                    tree, provisional.id, created
                ),
                refresh=lambda: self.get_comments_use_case.execute(
                    GetCommentsRequest(lesson_id=lesson_id)
                ),
                failure_message="Could not publish your comment. Please try again.",
            )

        return PostCommentResponse(comment=comment, provisional_id=provisional.id)
