"""Unit tests for non-destructive tree mutations."""

from discuss.domain.service import (
    apply_moderated_node,
    build_bottom_up,
    find_node,
    insert_comment,
    insert_reply,
    replace_comment,
    replace_reply,
    walk,
)
from discuss.domain.value import (
    CommentId,
    ModerationStatus,
    ModerationTarget,
    ReplyId,
)
from tests.conftest import make_comment, make_reply


def _sample_tree():
    """c1 -> r1 -> r2, plus an untouched sibling thread c2 -> r3."""
    r2 = make_reply("r2", parent_reply_id="r1")
    r1 = make_reply("r1", replies=(r2,))
    c1 = make_comment("c1", replies=(r1,))
    c2 = make_comment("c2", replies=(make_reply("r3", comment_id="c2"),))
    return (c1, c2)


def _deep_tree(depth: int):
    """c1 -> r{depth-1} -> ... -> r0, one reply per level."""
    reply = make_reply("r0", parent_reply_id="r1")
    for index in range(1, depth):
        parent = f"r{index + 1}" if index < depth - 1 else None
        reply = make_reply(f"r{index}", parent_reply_id=parent, replies=(reply,))
    return (make_comment("c1", replies=(reply,)),)


class TestInsertReply:
    """Tests for insert_reply."""

    def test_direct_reply_becomes_first_child_of_root(self):
        tree = _sample_tree()
        new = make_reply("r9")

        result = insert_reply(tree, new)

        assert [r.id for r in result[0].replies] == ["r9", "r1"]

    def test_nested_reply_becomes_first_child_of_parent(self):
        tree = _sample_tree()
        new = make_reply("r9", parent_reply_id="r1")

        result = insert_reply(tree, new)

        r1 = result[0].replies[0]
        assert [r.id for r in r1.replies] == ["r9", "r2"]

    def test_deep_insert_at_any_depth(self):
        tree = _sample_tree()
        new = make_reply("r9", parent_reply_id="r2")

        result = insert_reply(tree, new)

        r2 = result[0].replies[0].replies[0]
        assert [r.id for r in r2.replies] == ["r9"]

    def test_input_tree_is_untouched(self):
        tree = _sample_tree()
        before = tree[0].replies[0].replies

        insert_reply(tree, make_reply("r9", parent_reply_id="r1"))

        assert tree[0].replies[0].replies is before
        assert len(before) == 1

    def test_other_threads_keep_identity(self):
        tree = _sample_tree()

        result = insert_reply(tree, make_reply("r9", parent_reply_id="r2"))

        assert result[1] is tree[1]
        assert result[0] is not tree[0]

    def test_missing_parent_falls_back_to_thread_root(self):
        tree = _sample_tree()
        orphan = make_reply("r9", parent_reply_id="gone")

        result = insert_reply(tree, orphan)

        assert result[0].replies[0].id == "r9"
        assert result[0].replies[1] is tree[0].replies[0]

    def test_missing_root_comment_leaves_tree_unchanged(self):
        tree = _sample_tree()

        result = insert_reply(tree, make_reply("r9", comment_id="nope"))

        assert result is tree


class TestReplaceReply:
    """Tests for replace_reply."""

    def test_replaces_in_place(self):
        tree = insert_reply(_sample_tree(), make_reply("temp-1", parent_reply_id="r1"))
        confirmed = make_reply("r9", parent_reply_id="r1")

        result = replace_reply(tree, "temp-1", confirmed)

        r1 = result[0].replies[0]
        assert [r.id for r in r1.replies] == ["r9", "r2"]

    def test_keeps_descendants_when_incoming_has_none(self):
        tree = _sample_tree()
        incoming = make_reply("r1", status=ModerationStatus.REJECTED)

        result = replace_reply(tree, "r1", incoming)

        r1 = result[0].replies[0]
        assert r1.moderation_status is ModerationStatus.REJECTED
        assert r1.replies is tree[0].replies[0].replies

    def test_unknown_target_returns_same_tree(self):
        tree = _sample_tree()

        assert replace_reply(tree, "missing", make_reply("r9")) is tree

    def test_idempotent(self):
        tree = _sample_tree()
        incoming = make_reply("r2", parent_reply_id="r1", body="edited")

        once = replace_reply(tree, "r2", incoming)
        twice = replace_reply(once, "r2", incoming)

        assert twice == once


class TestOrderingLaw:
    """Insert then replace yields the reply at the insert position."""

    def test_insert_then_replace_matches_direct_insert(self):
        tree = _sample_tree()
        provisional = make_reply("temp-1", parent_reply_id="r1")
        confirmed = make_reply("r9", parent_reply_id="r1")

        via_provisional = replace_reply(
            insert_reply(tree, provisional), "temp-1", confirmed
        )
        direct = insert_reply(tree, confirmed)

        assert via_provisional == direct


    def test_later_sibling_comes_first(self):
        tree = _sample_tree()

        tree = insert_reply(tree, make_reply("r8", parent_reply_id="r1"))
        tree = insert_reply(tree, make_reply("r9", parent_reply_id="r1"))

        assert [r.id for r in tree[0].replies[0].replies] == ["r9", "r8", "r2"]

    def test_reconcile_keeps_children_added_to_provisional(self):
        tree = insert_reply(_sample_tree(), make_reply("temp-1"))
        tree = insert_reply(tree, make_reply("temp-2", parent_reply_id="temp-1"))
        confirmed = make_reply("r9", body="confirmed")

        result = replace_reply(tree, "temp-1", confirmed)

        node = result[0].replies[0]
        assert (node.id, node.body) == ("r9", "confirmed")
        assert [r.id for r in node.replies] == ["temp-2"]


class TestComments:
    """Tests for root comment insert and replace."""

    def test_insert_comment_prepends(self):
        tree = _sample_tree()

        result = insert_comment(tree, make_comment("c9"))

        assert [c.id for c in result] == ["c9", "c1", "c2"]
        assert result[1] is tree[0]

    def test_replace_comment_keeps_replies(self):
        tree = _sample_tree()
        incoming = make_comment("c1", status=ModerationStatus.REJECTED)

        result = replace_comment(tree, "c1", incoming)

        assert result[0].moderation_status is ModerationStatus.REJECTED
        assert result[0].replies is tree[0].replies

    def test_replace_unknown_comment_returns_same_tree(self):
        tree = _sample_tree()

        assert replace_comment(tree, "missing", make_comment("c9")) is tree


class TestTraversal:
    """Tests for walk and find_node."""

    def test_walk_is_pre_order_with_depths(self):
        tree = _sample_tree()

        visited = [(node.id, depth, root.id) for node, depth, root in walk(tree)]

        assert visited == [
            ("c1", 0, "c1"),
            ("r1", 1, "c1"),
            ("r2", 2, "c1"),
            ("c2", 0, "c2"),
            ("r3", 1, "c2"),
        ]

    def test_walk_handles_deep_threads(self):
        tree = _deep_tree(3000)

        assert sum(1 for _ in walk(tree)) == 3001

    def test_find_node(self):
        tree = _sample_tree()

        assert find_node(tree, CommentId("c1")).id == "c1"
        assert find_node(tree, CommentId("c1"), "r2").id == "r2"
        assert find_node(tree, CommentId("c2"), "r2") is None
        assert find_node(tree, CommentId("missing")) is None


class TestDeepThreads:
    """Mutations far below the recursion limit's depth."""

    def test_insert_under_deepest_reply(self):
        tree = _deep_tree(3000)

        result = insert_reply(tree, make_reply("new", parent_reply_id="r0"))

        deepest = find_node(result, CommentId("c1"), "r0")
        assert [r.id for r in deepest.replies] == ["new"]
        assert find_node(tree, CommentId("c1"), "r0").replies == ()
        assert sum(1 for _ in walk(result)) == 3002

    def test_replace_deepest_reply(self):
        tree = _deep_tree(3000)
        incoming = make_reply("r0", parent_reply_id="r1", body="edited")

        result = replace_reply(tree, "r0", incoming)

        assert find_node(result, CommentId("c1"), "r0").body == "edited"
        assert find_node(tree, CommentId("c1"), "r0").body == "reply r0"
        assert sum(1 for _ in walk(result)) == 3001

    def test_replace_keeps_untouched_subtree(self):
        tree = _deep_tree(3000)
        below = find_node(tree, CommentId("c1"), "r1500").replies[0]

        result = replace_reply(
            tree, "r1500", make_reply("r1500", parent_reply_id="r1501", body="x")
        )

        assert find_node(result, CommentId("c1"), "r1500").replies[0] is below

    def test_build_bottom_up_keeps_child_order(self):
        nested = {"a": ["b", "c"], "b": ["d"], "c": [], "d": []}

        result = build_bottom_up(
            "a", lambda item: nested[item], lambda item, children: (item, children)
        )

        assert result == ("a", (("b", (("d", ()),)), ("c", ())))


class TestApplyModeratedNode:
    """Tests for apply_moderated_node."""

    def test_reply_status_update_keeps_children(self):
        tree = _sample_tree()
        target = ModerationTarget(comment_id=CommentId("c1"), reply_id=ReplyId("r1"))
        moderated = make_reply("r1", status=ModerationStatus.APPROVED, body="new")

        result = apply_moderated_node(tree, target, moderated)

        assert result[0].replies[0].body == "new"
        assert result[0].replies[0].replies is tree[0].replies[0].replies

    def test_comment_status_update(self):
        tree = _sample_tree()
        target = ModerationTarget(comment_id=CommentId("c2"))
        moderated = make_comment("c2", status=ModerationStatus.REJECTED)

        result = apply_moderated_node(tree, target, moderated)

        assert result[1].moderation_status is ModerationStatus.REJECTED
        assert result[0] is tree[0]
