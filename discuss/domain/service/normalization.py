"""Normalization of comment trees arriving from the network.

Payloads may be partial: optimistic echoes, older server versions and list
endpoints all omit different fields. Every node entering the rest of the
system passes through here so it satisfies the tree invariants. Both
camelCase (wire) and snake_case keys are accepted.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from discuss.domain.model.comment import Comment, Reply
from discuss.domain.service.tree import build_bottom_up
from discuss.domain.value import (
    CommentId,
    LessonId,
    ModerationStatus,
    ReplyId,
    UserId,
    new_provisional_id,
)

USER_PLACEHOLDER = UserId("unknown-user")
LESSON_PLACEHOLDER = LessonId("unknown-lesson")
COMMENT_PLACEHOLDER = CommentId("unknown-comment")

RawNode = Mapping[str, Any]


def _get(raw: RawNode, *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _moderation_status(raw: RawNode) -> ModerationStatus:
    """Resolve the status; an explicit status wins over the legacy flag."""
    status = _get(raw, "moderationStatus", "moderation_status")
    if status is not None:
        try:
            return ModerationStatus(status)
        except ValueError:
            pass
    if _get(raw, "pendingModeration", "pending_moderation"):
        return ModerationStatus.PENDING
    return ModerationStatus.APPROVED


def _children(raw: RawNode) -> list[Any]:
    replies = raw.get("replies")
    if isinstance(replies, (list, tuple)):
        return list(replies)
    return []


def _moderation_record(raw: RawNode) -> dict[str, Any]:
    """Moderator and timestamp are kept only when both are present."""
    moderated_by_id = _get(raw, "moderatedById", "moderated_by_id")
    moderated_at = _get(raw, "moderatedAt", "moderated_at")
    if not moderated_by_id or not moderated_at:
        return {"moderated_by_id": None, "moderated_at": None}
    return {"moderated_by_id": moderated_by_id, "moderated_at": moderated_at}


def _reply_children(item: tuple[Any, Any]) -> list[tuple[Any, Any]]:
    raw, comment_id = item
    if isinstance(raw, Reply):
        return []
    root_id = _get(raw, "commentId", "comment_id") or comment_id or COMMENT_PLACEHOLDER
    return [(child, root_id) for child in _children(raw)]


def _build_reply(item: tuple[Any, Any], replies: tuple[Reply, ...]) -> Reply:
    raw, comment_id = item
    if isinstance(raw, Reply):
        return raw

    created_at = _get(raw, "createdAt", "created_at") or datetime.now(UTC)
    root_id = _get(raw, "commentId", "comment_id") or comment_id or COMMENT_PLACEHOLDER

    return Reply(
        id=ReplyId(_get(raw, "id") or new_provisional_id()),
        comment_id=CommentId(root_id),
        parent_reply_id=_get(raw, "parentReplyId", "parent_reply_id") or None,
        user_id=UserId(_get(raw, "userId", "user_id") or USER_PLACEHOLDER),
        body=_get(raw, "body") or "",
        created_at=created_at,
        updated_at=_get(raw, "updatedAt", "updated_at") or created_at,
        moderation_status=_moderation_status(raw),
        **_moderation_record(raw),
        replies=replies,
    )


def normalize_reply(
    raw: RawNode | Reply, comment_id: CommentId | None = None
) -> Reply:
    """Fill in defaults for a possibly partial reply and all its descendants.

    Args:
        raw: Reply payload or an already normalized reply
        comment_id: Root comment id to use when the payload carries none

    Returns:
        Normalized reply; ``parent_reply_id`` defaults to None (direct reply
        to the root comment)
    """
    return build_bottom_up((raw, comment_id), _reply_children, _build_reply)


def normalize_comment(raw: RawNode | Comment) -> Comment:
    """Fill in defaults for a possibly partial root comment and its replies.

    Args:
        raw: Comment payload or an already normalized comment

    Returns:
        Normalized comment with normalized replies
    """
    if isinstance(raw, Comment):
        return raw

    created_at = _get(raw, "createdAt", "created_at") or datetime.now(UTC)
    comment_id = CommentId(_get(raw, "id") or new_provisional_id())

    return Comment(
        id=comment_id,
        lesson_id=LessonId(_get(raw, "lessonId", "lesson_id") or LESSON_PLACEHOLDER),
        user_id=UserId(_get(raw, "userId", "user_id") or USER_PLACEHOLDER),
        body=_get(raw, "body") or "",
        created_at=created_at,
        updated_at=_get(raw, "updatedAt", "updated_at") or created_at,
        moderation_status=_moderation_status(raw),
        **_moderation_record(raw),
        replies=tuple(normalize_reply(child, comment_id) for child in _children(raw)),
    )


def normalize_comments(raw: list[Any] | None) -> tuple[Comment, ...]:
    """Normalize a list endpoint payload into a comment tree."""
    return tuple(normalize_comment(item) for item in raw or [])
