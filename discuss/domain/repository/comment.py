"""Comment repository interface.

The comment store lives on the server. This contract is the only way the
discussion subsystem reaches it; the wire format is an implementation
detail of the adapter.
"""

from abc import ABC, abstractmethod

from discuss.domain.model.comment import Comment, Reply
from discuss.domain.model.moderation import ModerationQueueItem
from discuss.domain.value import (
    CommentBody,
    CommentId,
    LessonId,
    ModerationAction,
    ModerationFilters,
    ReplyId,
)


class CommentRepository(ABC):
    """Repository for lesson comments and replies.

    Implementations return normalized nodes. Any failure (transport,
    refusal, validation on the server) is raised, never returned.
    """

    @abstractmethod
    async def create_comment(self, lesson_id: LessonId, body: CommentBody) -> Comment:
        """Create a root comment on a lesson.

        Args:
            lesson_id: Lesson to comment on
            body: Validated comment text

        Returns:
            The authoritative comment (pending or approved per server policy)
        """
        pass

    @abstractmethod
    async def create_reply(
        self,
        lesson_id: LessonId,
        comment_id: CommentId,
        parent_reply_id: ReplyId | None,
        body: CommentBody,
    ) -> Reply:
        """Create a reply to a root comment or to another reply.

        Args:
            lesson_id: Lesson owning the thread
            comment_id: Root comment of the thread
            parent_reply_id: Parent reply, None for a direct reply to the root
            body: Validated reply text

        Returns:
            The authoritative reply
        """
        pass

    @abstractmethod
    async def list_comments(self, lesson_id: LessonId) -> list[Comment]:
        """List the full comment tree of a lesson.

        Args:
            lesson_id: Lesson ID

        Returns:
            Root comments with nested replies, newest first at every level
        """
        pass

    @abstractmethod
    async def moderate_comment(
        self, comment_id: CommentId, action: ModerationAction
    ) -> Comment:
        """Approve or reject a root comment.

        Returns:
            The comment with its updated moderation fields
        """
        pass

    @abstractmethod
    async def moderate_reply(
        self, comment_id: CommentId, reply_id: ReplyId, action: ModerationAction
    ) -> Reply:
        """Approve or reject a reply.

        Returns:
            The reply with its updated moderation fields
        """
        pass

    @abstractmethod
    async def list_pending_moderation_items(
        self, filters: ModerationFilters
    ) -> list[ModerationQueueItem]:
        """List flattened moderation rows.

        Args:
            filters: Status and pagination

        Returns:
            Rows in depth-first order, parents before their replies
        """
        pass
