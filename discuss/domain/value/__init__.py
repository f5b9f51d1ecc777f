"""Domain value objects for lesson discussions."""

from discuss.domain.value.identifiers import (
    CommentId,
    CourseId,
    LessonId,
    ReplyId,
    UserId,
    is_provisional,
    new_provisional_id,
)
from discuss.domain.value.types import (
    CommentBody,
    ModerationAction,
    ModerationEntityType,
    ModerationFilters,
    ModerationStatus,
    ModerationTarget,
)

__all__ = [
    # Identifiers
    "LessonId",
    "CourseId",
    "CommentId",
    "ReplyId",
    "UserId",
    "new_provisional_id",
    "is_provisional",
    # Types
    "CommentBody",
    "ModerationAction",
    "ModerationEntityType",
    "ModerationFilters",
    "ModerationStatus",
    "ModerationTarget",
]
