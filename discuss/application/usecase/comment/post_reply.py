"""Post reply use case."""

from datetime import UTC, datetime

import logfire
from pydantic import BaseModel

from discuss.application.cache import CommentCache
from discuss.application.optimistic import run_optimistic
from discuss.application.validation import validate_body
from discuss.config import ThreadSettings
from discuss.domain.model.comment import Reply
from discuss.domain.service import CommentService, insert_reply, replace_reply
from discuss.domain.service.normalization import USER_PLACEHOLDER
from discuss.domain.value import (
    CommentId,
    LessonId,
    ModerationStatus,
    ReplyId,
    UserId,
    new_provisional_id,
)

from discuss.application.usecase.base import BaseUseCase
from .get_comments import GetCommentsRequest, GetCommentsUseCase


class PostReplyRequest(BaseModel):
    """Post reply request."""

    lesson_id: str
    comment_id: str  # Root comment of the thread
    parent_reply_id: str | None = None  # None for a direct reply to the root
    body: str
    author_id: str | None = None  # Current user, if known


class PostReplyResponse(BaseModel):
    """Post reply response."""

    reply: Reply
    provisional_id: str


class PostReplyUseCase(BaseUseCase):
    """Use case for publishing a reply at any depth optimistically."""

    def __init__(
        self,
        comment_service: CommentService,
        comment_cache: CommentCache,
        get_comments_use_case: GetCommentsUseCase,
        thread_settings: ThreadSettings,
    ) -> None:
        """Initialize post reply use case.

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

    async def execute(self, request: PostReplyRequest) -> PostReplyResponse:
        """Execute post reply flow.

        The provisional reply is shown as the first child of its parent. On
        success it is replaced in place by the server's reply, keeping any
        replies that were added beneath it in the meantime.

        Args:
            request: Thread, parent, body and author

        Returns:
            The authoritative reply and the provisional id it replaced

        Raises:
            ValidationError: If the body is blank or too long
            MutationFailedError: If the server call fails
        """
        lesson_id = LessonId(request.lesson_id)
        comment_id = CommentId(request.comment_id)
        parent_reply_id = (
            ReplyId(request.parent_reply_id) if request.parent_reply_id else None
        )
        body = validate_body(request.body, self.thread_settings.max_body_length)

        now = datetime.now(UTC)
        provisional = Reply(
            id=ReplyId(new_provisional_id()),
            comment_id=comment_id,
            parent_reply_id=parent_reply_id,
            user_id=UserId(request.author_id or USER_PLACEHOLDER),
            body=body.root,
            created_at=now,
            updated_at=now,
            moderation_status=ModerationStatus.PENDING,
        )

        with logfire.span(
            "post_reply",
            lesson_id=lesson_id,
            comment_id=comment_id,
            parent_reply_id=parent_reply_id,
            provisional_id=provisional.id,
        ):
            reply = await run_optimistic(
                self.comment_cache.cell(lesson_id),
                operation="post_reply",
                propose=lambda tree: insert_reply(tree, provisional),
                submit=lambda: self.comment_service.create_reply(
                    lesson_id, comment_id, parent_reply_id, body
                ),
                reconcile=lambda tree, created: replace_reply(
                    tree, provisional.id, created
                ),
                refresh=lambda: self.get_comments_use_case.execute(
                    GetCommentsRequest(lesson_id=lesson_id)
                ),
                failure_message="Could not publish your reply. Please try again.",
            )

        return PostReplyResponse(reply=reply, provisional_id=provisional.id)
