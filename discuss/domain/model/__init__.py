"""Domain model entities for lesson discussions."""

from discuss.domain.model.comment import Comment, CommentTree, Node, Reply
from discuss.domain.model.moderation import (
    LessonMeta,
    ModerationContext,
    ModerationQueueItem,
)

__all__ = [
    "Comment",
    "CommentTree",
    "Node",
    "Reply",
    "LessonMeta",
    "ModerationContext",
    "ModerationQueueItem",
]
