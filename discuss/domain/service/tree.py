"""Non-destructive mutations of a lesson's comment tree.

Every function returns a new tree and leaves its input untouched. Only the
nodes on the path from the changed reply up to its root comment are copied;
all other comments and subtrees keep their identity, so callers can detect
changes with ``is``. Nothing here recurses per nesting level, so thread
depth is bounded only by memory.
"""

from collections.abc import Callable, Iterator
from typing import Any

import logfire

from discuss.domain.model.comment import Comment, CommentTree, Node, Reply
from discuss.domain.value import CommentId, ModerationTarget


def _splice(items: tuple, index: int, item) -> tuple:
    return items[:index] + (item,) + items[index + 1 :]


def _with_replies(node, replies: tuple[Reply, ...]):
    return node.model_copy(update={"replies": replies})


def _merge(current, incoming):
    """Take ``incoming`` but keep ``current``'s children if it brings none."""
    if incoming.replies or not current.replies:
        return incoming
    return _with_replies(incoming, current.replies)


def _find_path(replies: tuple[Reply, ...], node_id: str) -> list[int] | None:
    """Sibling indexes leading from ``replies`` down to ``node_id``.

    Pre-order search with an explicit stack. Each entry links back to its
    parent entry, so the path is only materialized for the match.
    """
    stack: list[tuple[Reply, int, Any]] = [
        (item, index, None) for index, item in reversed(list(enumerate(replies)))
    ]
    while stack:
        entry = stack.pop()
        node = entry[0]
        if node.id == node_id:
            path: list[int] = []
            while entry is not None:
                path.append(entry[1])
                entry = entry[2]
            path.reverse()
            return path
        stack.extend(
            (child, index, entry)
            for index, child in reversed(list(enumerate(node.replies)))
        )
    return None


def _update_at(
    replies: tuple[Reply, ...], path: list[int], change: Callable[[Reply], Reply]
) -> tuple[Reply, ...]:
    """Apply ``change`` to the node at ``path`` and rebuild its ancestors."""
    levels = [replies]
    for index in path[:-1]:
        levels.append(levels[-1][index].replies)

    node = change(levels[-1][path[-1]])
    for depth in range(len(path) - 1, 0, -1):
        parent = levels[depth - 1][path[depth - 1]]
        node = _with_replies(parent, _splice(levels[depth], path[depth], node))
    return _splice(levels[0], path[0], node)


def build_bottom_up(
    root: Any,
    children_of: Callable[[Any], list[Any]],
    build: Callable[[Any, tuple], Any],
) -> Any:
    """Build a nested structure from ``root`` without recursion.

    Args:
        root: Source item at the top of the structure
        children_of: Returns an item's children in display order
        build: Makes a node from an item and its already built children

    Returns:
        The node built for ``root``
    """
    order: list[tuple[Any, int]] = [(root, -1)]
    position = 0
    while position < len(order):
        item = order[position][0]
        order.extend((child, position) for child in children_of(item))
        position += 1

    # Children sit after their parent, so a reverse pass sees them first
    built: list[list[Any]] = [[] for _ in order]
    node = None
    for position in range(len(order) - 1, -1, -1):
        item, parent = order[position]
        node = build(item, tuple(reversed(built[position])))
        if parent >= 0:
            built[parent].append(node)
    return node


def insert_reply(tree: CommentTree, reply: Reply) -> CommentTree:
    """Insert a reply into the thread of ``reply.comment_id``.

    The reply becomes the first child of its parent reply, or the first
    direct reply of the root comment when ``parent_reply_id`` is None. If the
    parent cannot be found the reply is placed at the thread root instead of
    being dropped.

    Args:
        tree: Current root comments
        reply: Reply to insert

    Returns:
        New tree; the input itself when the root comment is not present
    """
    for index, comment in enumerate(tree):
        if comment.id != reply.comment_id:
            continue

        path = None
        if reply.parent_reply_id is not None:
            path = _find_path(comment.replies, reply.parent_reply_id)
            if path is None:
                logfire.warn(
                    "Reply parent not found, inserting at thread root",
                    reply_id=reply.id,
                    comment_id=comment.id,
                    parent_reply_id=reply.parent_reply_id,
                )

        if path is None:
            replies = (reply, *comment.replies)
        else:
            replies = _update_at(
                comment.replies,
                path,
                lambda parent: _with_replies(parent, (reply, *parent.replies)),
            )

        return _splice(tree, index, _with_replies(comment, replies))

    logfire.warn(
        "Reply target comment not in tree",
        reply_id=reply.id,
        comment_id=reply.comment_id,
    )
    return tree


def replace_reply(tree: CommentTree, target_id: str, incoming: Reply) -> CommentTree:
    """Replace the reply with id ``target_id`` wherever it sits in the tree.

    Position among siblings is preserved. If ``incoming`` has no replies of
    its own, the replaced node's children are carried over.

    Returns:
        New tree, or the input itself when no reply has that id
    """
    for index, comment in enumerate(tree):
        path = _find_path(comment.replies, target_id)
        if path is None:
            continue
        replies = _update_at(
            comment.replies, path, lambda current: _merge(current, incoming)
        )
        return _splice(tree, index, _with_replies(comment, replies))

    logfire.debug("Stale reply replace ignored", target_id=target_id)
    return tree

def insert_comment(tree: CommentTree, comment: Comment) -> CommentTree:
    """Prepend a root comment (newest first)."""
    return (comment, *tree)


def replace_comment(
    tree: CommentTree, target_id: str, incoming: Comment
) -> CommentTree:
    """Replace a root comment in place, keeping its replies if needed.

    Returns:
        New tree, or the input itself when no comment has that id
    """
    for index, comment in enumerate(tree):
        if comment.id == target_id:
            return _splice(tree, index, _merge(comment, incoming))

    logfire.debug("Stale comment replace ignored", target_id=target_id)
    return tree


def walk(tree: CommentTree) -> Iterator[tuple[Node, int, Comment]]:
    """Pre-order traversal yielding ``(node, depth, root_comment)``.

    Root comments have depth 0. Iterative, so arbitrarily deep threads do
    not hit the recursion limit.
    """
    for comment in tree:
        stack: list[tuple[Node, int]] = [(comment, 0)]
        while stack:
            node, depth = stack.pop()
            yield node, depth, comment
            stack.extend((child, depth + 1) for child in reversed(node.replies))


def find_node(
    tree: CommentTree, comment_id: CommentId, reply_id: str | None = None
) -> Node | None:
    """Look up a root comment, or a reply inside that comment's thread."""
    for comment in tree:
        if comment.id != comment_id:
            continue
        if reply_id is None:
            return comment
        for node, _depth, _root in walk((comment,)):
            if node.id == reply_id:
                return node
        return None
    return None


def apply_moderated_node(
    tree: CommentTree, target: ModerationTarget, node: Node
) -> CommentTree:
    """Swap in a node returned by a moderation action, keeping descendants."""
    if target.reply_id is None:
        if not isinstance(node, Comment):
            return tree
        return replace_comment(tree, target.comment_id, node)
    if not isinstance(node, Reply):
        return tree
    return replace_reply(tree, target.reply_id, node)
