"""Moderation queue models.

Queue rows are a flattened projection of comment trees. They are never
stored on their own; the server and the client both derive them from the
trees they hold.
"""

from datetime import datetime

from pydantic import Field, computed_field

from discuss.domain.model.common import DomainModel
from discuss.domain.value import (
    CommentId,
    CourseId,
    LessonId,
    ModerationEntityType,
    ModerationStatus,
    ModerationTarget,
    ReplyId,
    UserId,
)


class ModerationQueueItem(DomainModel):
    """One pending (or rejected) comment or reply awaiting a reviewer.

    Carries enough denormalized context for a reviewer to act without
    loading the full thread.
    """

    id: str
    entity_id: str
    comment_id: CommentId
    lesson_id: LessonId
    course_id: CourseId | None = None
    lesson_title: str = ""
    course_title: str = ""
    user_id: UserId
    user_display_name: str = ""
    body: str
    created_at: datetime
    moderation_status: ModerationStatus
    moderated_by_id: UserId | None = None
    moderated_at: datetime | None = None
    type: ModerationEntityType
    depth: int = Field(ge=0)

    @computed_field
    @property
    def pending_moderation(self) -> bool:
        """Denormalized flag, always equal to ``moderation_status == pending``."""
        return self.moderation_status is ModerationStatus.PENDING

    @property
    def target(self) -> ModerationTarget:
        """Moderation target addressed by this row."""
        if self.type is ModerationEntityType.REPLY:
            return ModerationTarget(
                comment_id=self.comment_id, reply_id=ReplyId(self.entity_id)
            )
        return ModerationTarget(comment_id=self.comment_id)


class LessonMeta(DomainModel):
    """Lesson and course titles shown next to queue rows."""

    lesson_id: LessonId
    course_id: CourseId | None = None
    lesson_title: str = ""
    course_title: str = ""


class ModerationContext(DomainModel):
    """Lookup tables used to denormalize queue rows."""

    lessons: dict[LessonId, LessonMeta] = Field(default_factory=dict)
    user_display_names: dict[UserId, str] = Field(default_factory=dict)

    def lesson(self, lesson_id: LessonId) -> LessonMeta:
        """Metadata for a lesson, empty titles when unknown."""
        return self.lessons.get(lesson_id) or LessonMeta(lesson_id=lesson_id)

    def display_name(self, user_id: UserId) -> str:
        """Display name for a user, empty when unknown."""
        return self.user_display_names.get(user_id, "")
