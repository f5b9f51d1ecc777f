"""Read-only projection of a comment tree for rendering."""

from pydantic import BaseModel, ConfigDict

from discuss.domain.model.comment import CommentTree, Node
from discuss.domain.value import CommentId


class ThreadNodeView(BaseModel):
    """A node plus the actions the display layer may offer on it."""

    model_config = ConfigDict(frozen=True)

    node: Node
    depth: int
    root_comment_id: CommentId
    can_reply: bool
    can_moderate: bool
    children: tuple["ThreadNodeView", ...] = ()


def _project(
    node: Node,
    depth: int,
    root_comment_id: CommentId,
    max_depth: int,
    allow_moderation: bool,
) -> ThreadNodeView:
    return ThreadNodeView(
        node=node,
        depth=depth,
        root_comment_id=root_comment_id,
        can_reply=depth < max_depth - 1,
        can_moderate=allow_moderation and node.pending_moderation,
        children=tuple(
            _project(child, depth + 1, root_comment_id, max_depth, allow_moderation)
            for child in node.replies
        ),
    )


def build_thread_view(
    tree: CommentTree, max_depth: int, allow_moderation: bool = False
) -> tuple[ThreadNodeView, ...]:
    """Project ``tree`` for display.

    Root comments are shown newest first by creation time. Replies keep
    their tree order. Nodes deeper than ``max_depth`` are still listed but
    are not offered a reply action.

    Args:
        tree: Normalized comment tree
        max_depth: Depth limit for the reply action
        allow_moderation: Whether the viewer may moderate

    Returns:
        One view per root comment
    """
    roots = sorted(tree, key=lambda comment: comment.created_at, reverse=True)
    return tuple(
        _project(comment, 0, comment.id, max_depth, allow_moderation)
        for comment in roots
    )
