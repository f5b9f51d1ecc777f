"""Unit tests for the moderation state machine and queue projection."""

from datetime import UTC, datetime

import pytest

from discuss.domain.error import InvalidModerationTransitionError
from discuss.domain.model.moderation import LessonMeta, ModerationContext
from discuss.domain.service import (
    apply_action,
    apply_action_to_subtree,
    build_moderation_queue,
    can_transition,
    remove_moderated_items,
    remove_queue_item,
    transition,
    walk,
)
from discuss.domain.value import (
    CourseId,
    LessonId,
    ModerationAction,
    ModerationEntityType,
    ModerationStatus,
    UserId,
)
from tests.conftest import make_comment, make_reply

PENDING = ModerationStatus.PENDING
APPROVED = ModerationStatus.APPROVED
REJECTED = ModerationStatus.REJECTED


class TestTransitions:
    """Tests for the status lifecycle."""

    @pytest.mark.parametrize(
        "current,target",
        [
            (PENDING, APPROVED),
            (PENDING, REJECTED),
            (REJECTED, APPROVED),
            (APPROVED, REJECTED),
        ],
    )
    def test_allowed(self, current, target):
        assert transition(current, target) is target

    @pytest.mark.parametrize("status", [APPROVED, REJECTED])
    def test_repeat_is_a_no_op(self, status):
        assert can_transition(status, status)

    @pytest.mark.parametrize("current", [PENDING, APPROVED, REJECTED])
    def test_nothing_returns_to_pending(self, current):
        with pytest.raises(InvalidModerationTransitionError):
            transition(current, PENDING)


class TestApplyAction:
    """Tests for apply_action."""

    def test_records_moderator_and_time(self):
        node = make_reply("r1", status=PENDING)
        when = datetime(2025, 6, 1, tzinfo=UTC)

        result = apply_action(node, ModerationAction.APPROVE, UserId("mod"), when)

        assert result.moderation_status is APPROVED
        assert result.pending_moderation is False
        assert result.moderated_by_id == "mod"
        assert result.moderated_at == when
        assert node.moderation_status is PENDING

    def test_repeat_returns_node_unchanged(self):
        node = make_comment("c1", status=REJECTED)

        result = apply_action(
            node, ModerationAction.REJECT, UserId("mod"), datetime.now(UTC)
        )

        assert result is node

    def test_children_untouched(self):
        child = make_reply("r2", status=PENDING, parent_reply_id="r1")
        node = make_reply("r1", status=PENDING, replies=(child,))

        result = apply_action(
            node, ModerationAction.REJECT, UserId("mod"), datetime.now(UTC)
        )

        assert result.replies[0] is child


class TestApplyActionToSubtree:
    """Tests for apply_action_to_subtree."""

    WHEN = datetime(2025, 6, 1, tzinfo=UTC)

    def test_reject_cascades_to_every_unrejected_descendant(self):
        r3 = make_reply("r3", status=APPROVED, parent_reply_id="r2")
        r2 = make_reply("r2", status=PENDING, parent_reply_id="r1", replies=(r3,))
        r1 = make_reply("r1", status=APPROVED, replies=(r2,))
        comment = make_comment("c1", status=PENDING, replies=(r1,))

        result = apply_action_to_subtree(
            comment, ModerationAction.REJECT, UserId("mod"), self.WHEN
        )

        statuses = [node.moderation_status for node, _d, _r in walk((result,))]
        assert statuses == [REJECTED] * 4
        assert result.replies[0].replies[0].replies[0].moderated_by_id == "mod"

    def test_approve_cascades_only_to_pending(self):
        rejected = make_reply("r3", status=REJECTED, parent_reply_id="r1")
        pending = make_reply("r2", status=PENDING, parent_reply_id="r1")
        node = make_reply("r1", status=PENDING, replies=(pending, rejected))

        result = apply_action_to_subtree(
            node, ModerationAction.APPROVE, UserId("mod"), self.WHEN
        )

        assert result.moderation_status is APPROVED
        assert result.replies[0].moderation_status is APPROVED
        assert result.replies[1] is rejected

    def test_repeated_action_still_reaches_descendants(self):
        child = make_reply("r1", status=PENDING)
        comment = make_comment("c1", status=REJECTED, replies=(child,))

        result = apply_action_to_subtree(
            comment, ModerationAction.REJECT, UserId("mod"), self.WHEN
        )

        assert result.moderated_by_id is None
        assert result.replies[0].moderation_status is REJECTED

    def test_nothing_to_change_returns_same_node(self):
        child = make_reply("r1", status=REJECTED)
        comment = make_comment("c1", status=APPROVED, replies=(child,))

        result = apply_action_to_subtree(
            comment, ModerationAction.APPROVE, UserId("mod"), self.WHEN
        )

        assert result is comment


class TestModerationQueue:
    """Tests for build_moderation_queue."""

    def test_pre_order_parents_before_replies(self):
        r2 = make_reply("r2", parent_reply_id="r1", status=PENDING)
        r1 = make_reply("r1", status=PENDING, replies=(r2,))
        tree = (make_comment("c1", status=PENDING, replies=(r1,)),)

        queue = build_moderation_queue(tree)

        assert [(i.id, i.depth) for i in queue] == [("c1", 0), ("r1", 1), ("r2", 2)]
        assert [i.type for i in queue] == [
            ModerationEntityType.COMMENT,
            ModerationEntityType.REPLY,
            ModerationEntityType.REPLY,
        ]
        assert all(i.comment_id == "c1" for i in queue)

    def test_only_pending_nodes_listed_with_structural_depth(self):
        r2 = make_reply("r2", parent_reply_id="r1", status=PENDING)
        r1 = make_reply("r1", status=APPROVED, replies=(r2,))
        tree = (make_comment("c1", status=APPROVED, replies=(r1,)),)

        queue = build_moderation_queue(tree)

        assert [(i.id, i.depth) for i in queue] == [("r2", 2)]

    def test_rejected_listing(self):
        tree = (
            make_comment("c1", status=REJECTED),
            make_comment("c2", status=PENDING),
        )

        queue = build_moderation_queue(tree, status=REJECTED)

        assert [i.id for i in queue] == ["c1"]

    def test_context_fills_titles_and_names(self):
        tree = (make_comment("c1", status=PENDING),)
        context = ModerationContext(
            lessons={
                LessonId("L1"): LessonMeta(
                    lesson_id=LessonId("L1"),
                    course_id=CourseId("K1"),
                    lesson_title="Intro",
                    course_title="Biology",
                )
            },
            user_display_names={UserId("u1"): "Ada"},
        )

        (item,) = build_moderation_queue(tree, context)

        assert item.lesson_title == "Intro"
        assert item.course_title == "Biology"
        assert item.course_id == "K1"
        assert item.user_display_name == "Ada"

    def test_queue_item_target(self):
        r1 = make_reply("r1", status=PENDING)
        tree = (make_comment("c1", replies=(r1,)),)

        (item,) = build_moderation_queue(tree)

        assert item.target.comment_id == "c1"
        assert item.target.reply_id == "r1"


class TestRemoveQueueItem:
    """Tests for remove_queue_item."""

    def test_removes_matching_row(self):
        tree = (make_comment("c1", status=PENDING), make_comment("c2", status=PENDING))
        queue = build_moderation_queue(tree)

        assert [i.id for i in remove_queue_item(queue, "c1")] == ["c2"]

    def test_absent_row_returns_same_queue(self):
        queue = build_moderation_queue((make_comment("c1", status=PENDING),))

        assert remove_queue_item(queue, "missing") is queue


class TestRemoveModeratedItems:
    """Tests for remove_moderated_items."""

    def test_drops_target_and_cascaded_rows(self):
        r2 = make_reply("r2", status=PENDING, parent_reply_id="r1")
        r1 = make_reply("r1", status=PENDING, replies=(r2,))
        tree = (
            make_comment("c1", status=PENDING, replies=(r1,)),
            make_comment("c2", status=PENDING),
        )
        queue = build_moderation_queue(tree)
        moderated = apply_action_to_subtree(
            tree[0], ModerationAction.REJECT, UserId("mod"), datetime.now(UTC)
        )

        assert [i.id for i in remove_moderated_items(queue, moderated)] == ["c2"]

    def test_descendant_with_same_status_keeps_row(self):
        r1 = make_reply("r1", status=PENDING)
        queue = build_moderation_queue(
            (make_comment("c1", status=PENDING, replies=(r1,)),)
        )
        moderated = make_comment("c1", status=APPROVED, replies=(r1,))

        assert [i.id for i in remove_moderated_items(queue, moderated)] == ["r1"]

    def test_unrelated_queue_returned_as_is(self):
        queue = build_moderation_queue((make_comment("c2", status=PENDING),))

        assert remove_moderated_items(queue, make_comment("c1")) is queue
