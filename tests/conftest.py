"""Test configuration and fixtures."""

from datetime import UTC, datetime, timedelta

import logfire
import pytest

from discuss.domain.model.comment import Comment, Reply
from discuss.domain.value import (
    CommentId,
    LessonId,
    ModerationStatus,
    ReplyId,
    UserId,
)

BASE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)

# Keep spans and logs local during tests
logfire.configure(send_to_logfire=False, console=False)


def make_reply(
    reply_id: str,
    comment_id: str = "c1",
    parent_reply_id: str | None = None,
    status: ModerationStatus = ModerationStatus.APPROVED,
    replies: tuple[Reply, ...] = (),
    minutes: int = 0,
    body: str | None = None,
) -> Reply:
    """Build a reply with sensible defaults."""
    created = BASE_TIME + timedelta(minutes=minutes)
    return Reply(
        id=ReplyId(reply_id),
        comment_id=CommentId(comment_id),
        parent_reply_id=ReplyId(parent_reply_id) if parent_reply_id else None,
        user_id=UserId("u1"),
        body=body or f"reply {reply_id}",
        created_at=created,
        updated_at=created,
        moderation_status=status,
        replies=replies,
    )


def make_comment(
    comment_id: str,
    lesson_id: str = "L1",
    status: ModerationStatus = ModerationStatus.APPROVED,
    replies: tuple[Reply, ...] = (),
    minutes: int = 0,
    body: str | None = None,
) -> Comment:
    """Build a root comment with sensible defaults."""
    created = BASE_TIME + timedelta(minutes=minutes)
    return Comment(
        id=CommentId(comment_id),
        lesson_id=LessonId(lesson_id),
        user_id=UserId("u1"),
        body=body or f"comment {comment_id}",
        created_at=created,
        updated_at=created,
        moderation_status=status,
        replies=replies,
    )


@pytest.fixture
def lesson_id() -> LessonId:
    return LessonId("L1")
