"""Comment domain service."""

import logfire

from discuss.domain.model.comment import Comment, Node, Reply
from discuss.domain.model.moderation import ModerationQueueItem
from discuss.domain.repository import CommentRepository
from discuss.domain.service.normalization import normalize_comment, normalize_reply
from discuss.domain.value import (
    CommentBody,
    CommentId,
    LessonId,
    ModerationAction,
    ModerationFilters,
    ModerationTarget,
    ReplyId,
)

from .base import Service


class CommentService(Service):
    """Domain service for talking to the comment server."""

    def __init__(self, comment_repository: CommentRepository) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Server-side comment store
        """
        self.comment_repository = comment_repository

    async def create_comment(self, lesson_id: LessonId, body: CommentBody) -> Comment:
        """Create a root comment on a lesson.

        Args:
            lesson_id: Lesson ID
            body: Validated comment text

        Returns:
            Normalized authoritative comment
        """
        with logfire.span(
            "comment_service.create_comment",
            lesson_id=lesson_id,
            body_length=len(body.root),
        ):
            comment = normalize_comment(
                await self.comment_repository.create_comment(lesson_id, body)
            )
            logfire.info(
                "Comment created",
                comment_id=comment.id,
                lesson_id=lesson_id,
                moderation_status=comment.moderation_status.value,
            )
            return comment

    async def create_reply(
        self,
        lesson_id: LessonId,
        comment_id: CommentId,
        parent_reply_id: ReplyId | None,
        body: CommentBody,
    ) -> Reply:
        """Create a reply to a root comment or another reply.

        Args:
            lesson_id: Lesson ID
            comment_id: Root comment of the thread
            parent_reply_id: Parent reply (None for a direct reply to the root)
            body: Validated reply text

        Returns:
            Normalized authoritative reply
        """
        with logfire.span(
            "comment_service.create_reply",
            lesson_id=lesson_id,
            comment_id=comment_id,
            parent_reply_id=parent_reply_id,
        ):
            reply = normalize_reply(
                await self.comment_repository.create_reply(
                    lesson_id, comment_id, parent_reply_id, body
                ),
                comment_id,
            )
            logfire.info(
                "Reply created",
                reply_id=reply.id,
                comment_id=comment_id,
                moderation_status=reply.moderation_status.value,
            )
            return reply

    async def list_comments(self, lesson_id: LessonId) -> tuple[Comment, ...]:
        """Fetch the full comment tree for a lesson.

        Args:
            lesson_id: Lesson ID

        Returns:
            Normalized root comments
        """
        with logfire.span("comment_service.list_comments", lesson_id=lesson_id):
            comments = tuple(
                normalize_comment(comment)
                for comment in await self.comment_repository.list_comments(lesson_id)
            )
            logfire.info(
                "Comments retrieved for lesson",
                lesson_id=lesson_id,
                count=len(comments),
            )
            return comments

    async def moderate(self, target: ModerationTarget, action: ModerationAction) -> Node:
        """Approve or reject a comment or reply.

        Args:
            target: Root comment, or reply within it
            action: Approve or reject

        Returns:
            The moderated node as returned by the server
        """
        with logfire.span(
            "comment_service.moderate",
            comment_id=target.comment_id,
            reply_id=target.reply_id,
            action=action.value,
        ):
            if target.reply_id is None:
                node: Node = normalize_comment(
                    await self.comment_repository.moderate_comment(
                        target.comment_id, action
                    )
                )
            else:
                node = normalize_reply(
                    await self.comment_repository.moderate_reply(
                        target.comment_id, target.reply_id, action
                    ),
                    target.comment_id,
                )
            logfire.info(
                "Node moderated",
                entity_id=target.entity_id,
                type=target.type.value,
                moderation_status=node.moderation_status.value,
            )
            return node

    async def list_moderation_queue(
        self, filters: ModerationFilters
    ) -> tuple[ModerationQueueItem, ...]:
        """Fetch moderation rows from the server.

        Args:
            filters: Status and pagination

        Returns:
            Flattened rows, parents before their replies
        """
        with logfire.span(
            "comment_service.list_moderation_queue",
            status=filters.status.value,
            page=filters.page,
            page_size=filters.page_size,
        ):
            items = tuple(
                await self.comment_repository.list_pending_moderation_items(filters)
            )
            logfire.info("Moderation queue retrieved", count=len(items))
            return items
