"""Comment and reply entities.

A lesson discussion is a forest of root comments. Each root comment owns an
ordered tuple of replies, and every reply may own replies of its own, with no
structural depth limit. Sibling order is newest-first at every level.

Nodes are immutable. A change to one reply produces new copies of the nodes
on the path from that reply up to its root comment; every other subtree is
shared by reference with the previous tree.
"""

from datetime import datetime

from pydantic import computed_field

from discuss.domain.model.common import DomainModel
from discuss.domain.value import (
    CommentId,
    LessonId,
    ModerationStatus,
    ReplyId,
    UserId,
)


class Reply(DomainModel):
    """Reply to a root comment or to another reply.

    Threading is managed through:
    - comment_id: Root comment of the thread (never changes)
    - parent_reply_id: Direct parent reply (None for direct replies to the root)
    - replies: Child replies, newest first
    """

    id: ReplyId
    comment_id: CommentId
    parent_reply_id: ReplyId | None = None
    user_id: UserId
    body: str
    created_at: datetime
    updated_at: datetime
    moderation_status: ModerationStatus = ModerationStatus.APPROVED
    moderated_by_id: UserId | None = None
    moderated_at: datetime | None = None
    replies: tuple["Reply", ...] = ()

    @computed_field
    @property
    def pending_moderation(self) -> bool:
        """Denormalized flag, always equal to ``moderation_status == pending``."""
        return self.moderation_status is ModerationStatus.PENDING


class Comment(DomainModel):
    """Root comment attached directly to a lesson."""

    id: CommentId
    lesson_id: LessonId
    user_id: UserId
    body: str
    created_at: datetime
    updated_at: datetime
    moderation_status: ModerationStatus = ModerationStatus.APPROVED
    moderated_by_id: UserId | None = None
    moderated_at: datetime | None = None
    replies: tuple[Reply, ...] = ()

    @computed_field
    @property
    def pending_moderation(self) -> bool:
        """Denormalized flag, always equal to ``moderation_status == pending``."""
        return self.moderation_status is ModerationStatus.PENDING


Node = Comment | Reply

# Root comments of one lesson, in display order
CommentTree = tuple[Comment, ...]
