"""Domain services."""

from .base import Service
from .comment_service import CommentService
from .moderation import (
    ALLOWED_TRANSITIONS,
    apply_action,
    apply_action_to_subtree,
    build_moderation_queue,
    can_transition,
    remove_moderated_items,
    remove_queue_item,
    transition,
)
from .normalization import normalize_comment, normalize_comments, normalize_reply
from .tree import (
    apply_moderated_node,
    build_bottom_up,
    find_node,
    insert_comment,
    insert_reply,
    replace_comment,
    replace_reply,
    walk,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "CommentService",
    "Service",
    "apply_action",
    "apply_action_to_subtree",
    "apply_moderated_node",
    "build_bottom_up",
    "build_moderation_queue",
    "can_transition",
    "find_node",
    "insert_comment",
    "insert_reply",
    "normalize_comment",
    "normalize_comments",
    "normalize_reply",
    "remove_moderated_items",
    "remove_queue_item",
    "replace_comment",
    "replace_reply",
    "transition",
    "walk",
]
