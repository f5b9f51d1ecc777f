"""Moderation state machine and queue projection.

Lifecycle of a comment or reply::

    pending  --approve-->  approved
    pending  --reject--->  rejected
    rejected --approve-->  approved   ("approve anyway")
    approved --reject--->  rejected

Nothing ever returns to ``pending``. Repeating the current status is a
no-op so a retried action is harmless. A decision on a node carries
down to its descendants (see ``apply_action_to_subtree``).
"""

from datetime import datetime

from discuss.domain.error import InvalidModerationTransitionError
from discuss.domain.model.comment import CommentTree, Node, Reply
from discuss.domain.model.moderation import ModerationContext, ModerationQueueItem
from discuss.domain.service.tree import build_bottom_up, walk
from discuss.domain.value import (
    ModerationAction,
    ModerationEntityType,
    ModerationStatus,
    UserId,
)

ALLOWED_TRANSITIONS: dict[ModerationStatus, frozenset[ModerationStatus]] = {
    ModerationStatus.PENDING: frozenset(
        {ModerationStatus.APPROVED, ModerationStatus.REJECTED}
    ),
    ModerationStatus.REJECTED: frozenset({ModerationStatus.APPROVED}),
    ModerationStatus.APPROVED: frozenset({ModerationStatus.REJECTED}),
}


def can_transition(current: ModerationStatus, target: ModerationStatus) -> bool:
    """Whether ``current -> target`` is allowed (repeats count as allowed)."""
    if target is ModerationStatus.PENDING:
        return False
    return target is current or target in ALLOWED_TRANSITIONS[current]


def transition(current: ModerationStatus, target: ModerationStatus) -> ModerationStatus:
    """Validate a status change.

    Returns:
        The new status

    Raises:
        InvalidModerationTransitionError: If the change is not supported
    """
    if not can_transition(current, target):
        raise InvalidModerationTransitionError(current.value, target.value)
    return target


def _moderated_copy(
    node: Node,
    status: ModerationStatus,
    moderator_id: UserId | None,
    moderated_at: datetime,
) -> Node:
    return node.model_copy(
        update={
            "moderation_status": status,
            "moderated_by_id": moderator_id,
            "moderated_at": moderated_at,
            "updated_at": moderated_at,
        }
    )


def apply_action(
    node: Node,
    action: ModerationAction,
    moderator_id: UserId | None,
    moderated_at: datetime,
) -> Node:
    """Return a copy of ``node`` moderated by ``action``.

    Only the node itself changes; its children are kept as they are. A
    repeated action returns the node unchanged.

    Raises:
        InvalidModerationTransitionError: If the action is not allowed
    """
    status = transition(node.moderation_status, action.target_status)
    if status is node.moderation_status:
        return node
    return _moderated_copy(node, status, moderator_id, moderated_at)


def _cascades_to(status: ModerationStatus, target: ModerationStatus) -> bool:
    """Whether a descendant in ``status`` follows its ancestor to ``target``."""
    if target is ModerationStatus.APPROVED:
        return status is ModerationStatus.PENDING
    return status is not ModerationStatus.REJECTED


def apply_action_to_subtree(
    node: Node,
    action: ModerationAction,
    moderator_id: UserId | None,
    moderated_at: datetime,
) -> Node:
    """Moderate ``node`` and carry the decision down to its descendants.

    Approving also approves every pending descendant; descendants already
    rejected stay rejected. Rejecting rejects every descendant that is not
    rejected yet. The descendants are updated even when the node itself
    already had the target status. Unchanged subtrees keep their identity.

    Raises:
        InvalidModerationTransitionError: If the action is not allowed on
            ``node``
    """
    root = apply_action(node, action, moderator_id, moderated_at)
    target = action.target_status

    def build(item: Node, children: tuple[Reply, ...]) -> Node:
        if item is node:
            updated = root
        elif _cascades_to(item.moderation_status, target):
            updated = _moderated_copy(item, target, moderator_id, moderated_at)
        else:
            updated = item
        if all(new is old for new, old in zip(children, item.replies)):
            return updated
        return updated.model_copy(update={"replies": children})

    return build_bottom_up(node, lambda item: item.replies, build)


def build_moderation_queue(
    tree: CommentTree,
    context: ModerationContext | None = None,
    status: ModerationStatus = ModerationStatus.PENDING,
) -> tuple[ModerationQueueItem, ...]:
    """Flatten a tree into reviewer rows.

    Pre-order traversal filtered to ``status``: a root comment comes before
    its own replies and a reply before its children, so reviewers see a
    parent before anything nested beneath it. ``depth`` is the structural
    depth counted from the root comment, whatever the status of the nodes
    in between.
    """
    context = context or ModerationContext()
    items: list[ModerationQueueItem] = []

    for node, depth, root in walk(tree):
        if node.moderation_status is not status:
            continue
        lesson = context.lesson(root.lesson_id)
        items.append(
            ModerationQueueItem(
                id=node.id,
                entity_id=node.id,
                comment_id=root.id,
                lesson_id=root.lesson_id,
                course_id=lesson.course_id,
                lesson_title=lesson.lesson_title,
                course_title=lesson.course_title,
                user_id=node.user_id,
                user_display_name=context.display_name(node.user_id),
                body=node.body,
                created_at=node.created_at,
                moderation_status=node.moderation_status,
                moderated_by_id=node.moderated_by_id,
                moderated_at=node.moderated_at,
                type=(
                    ModerationEntityType.REPLY
                    if isinstance(node, Reply)
                    else ModerationEntityType.COMMENT
                ),
                depth=depth,
            )
        )

    return tuple(items)


def remove_queue_item(
    queue: tuple[ModerationQueueItem, ...], item_id: str
) -> tuple[ModerationQueueItem, ...]:
    """Drop the row for ``item_id``; the input itself when absent."""
    remaining = tuple(item for item in queue if item.id != item_id)
    if len(remaining) == len(queue):
        return queue
    return remaining


def remove_moderated_items(
    queue: tuple[ModerationQueueItem, ...], moderated: Node
) -> tuple[ModerationQueueItem, ...]:
    """Drop the rows a moderation result has made stale.

    The row for ``moderated`` itself always goes. A row for one of its
    descendants goes when that descendant's status no longer matches the
    row. Returns the input itself when nothing is dropped.
    """
    statuses = {
        node.id: node.moderation_status for node, _depth, _root in walk((moderated,))
    }
    remaining = tuple(
        item
        for item in queue
        if item.id != moderated.id
        and statuses.get(item.id, item.moderation_status) is item.moderation_status
    )
    if len(remaining) == len(queue):
        return queue
    return remaining
