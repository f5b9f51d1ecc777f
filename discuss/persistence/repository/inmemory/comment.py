"""In-memory comment repository.

Plays the server's role for tests and local development. Nodes are kept in
a flat arena keyed by id with a parent index, and the nested view is
rebuilt on every read.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from itertools import count

import logfire

from discuss.domain.error import BusinessRuleViolationError, NotFoundError
from discuss.domain.model.comment import Comment, CommentTree, Reply
from discuss.domain.model.moderation import (
    LessonMeta,
    ModerationContext,
    ModerationQueueItem,
)
from discuss.domain.repository.comment import CommentRepository
from discuss.domain.service.moderation import (
    apply_action_to_subtree,
    build_moderation_queue,
)
from discuss.domain.service.tree import build_bottom_up, walk
from discuss.domain.value import (
    CommentBody,
    CommentId,
    LessonId,
    ModerationAction,
    ModerationFilters,
    ModerationStatus,
    ReplyId,
    UserId,
)


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing."""

    def __init__(
        self,
        author_id: UserId = UserId("member-1"),
        moderator_id: UserId = UserId("moderator-1"),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize in-memory comment repository.

        Args:
            author_id: User recorded as author of created nodes
            moderator_id: User recorded as moderator of moderated nodes
            clock: Time source (defaults to UTC now)
        """
        self.author_id = author_id
        self.moderator_id = moderator_id
        self._clock = clock or (lambda: datetime.now(UTC))

        # Nodes are stored without children; see _assemble
        self._comments: dict[CommentId, Comment] = {}
        self._replies: dict[ReplyId, Reply] = {}
        self._sequence: dict[str, int] = {}
        self._counter = count(1)
        self._comment_ids = count(1)
        self._reply_ids = count(1)

        self._moderated_lessons: set[LessonId] = set()
        self._lessons: dict[LessonId, LessonMeta] = {}
        self._users: dict[UserId, str] = {}

    # Setup helpers

    def set_lesson_moderated(self, lesson_id: LessonId, moderated: bool = True) -> None:
        """New comments on a moderated lesson start as pending."""
        if moderated:
            self._moderated_lessons.add(lesson_id)
        else:
            self._moderated_lessons.discard(lesson_id)

    def register_lesson(self, meta: LessonMeta) -> None:
        """Record lesson and course titles for moderation rows."""
        self._lessons[meta.lesson_id] = meta

    def register_user(self, user_id: UserId, display_name: str) -> None:
        """Record an author's display name for moderation rows."""
        self._users[user_id] = display_name

    def seed(self, comment: Comment) -> None:
        """Store an existing comment tree as-is (ids and statuses kept)."""
        self._store_subtree(comment)

    # Storage

    def _store_comment(self, comment: Comment) -> Comment:
        stored = comment.model_copy(update={"replies": ()})
        self._sequence.setdefault(stored.id, next(self._counter))
        self._comments[stored.id] = stored
        return stored

    def _store_reply(self, reply: Reply) -> Reply:
        stored = reply.model_copy(update={"replies": ()})
        self._sequence.setdefault(stored.id, next(self._counter))
        self._replies[stored.id] = stored
        return stored

    def _store_subtree(self, node) -> None:
        for item, _depth, _root in walk((node,)):
            if isinstance(item, Reply):
                self._store_reply(item)
            else:
                self._store_comment(item)

    def _children_index(self) -> dict[str, list[Reply]]:
        """Replies grouped by parent id (root comment id for direct replies)."""
        index: dict[str, list[Reply]] = {}
        for reply in self._replies.values():
            parent_key = reply.parent_reply_id or reply.comment_id
            if reply.parent_reply_id and reply.parent_reply_id not in self._replies:
                logfire.warn(
                    "Reply parent missing, listing at thread root",
                    reply_id=reply.id,
                    parent_reply_id=reply.parent_reply_id,
                )
                parent_key = reply.comment_id
            index.setdefault(parent_key, []).append(reply)
        for bucket in index.values():
            bucket.sort(key=lambda r: self._sequence[r.id], reverse=True)
        return index

    def _assemble(self, node, index: dict[str, list[Reply]]):
        return build_bottom_up(
            node,
            lambda item: index.get(item.id, []),
            lambda item, children: item.model_copy(update={"replies": children}),
        )

    def _tree(self, comments: list[Comment]) -> CommentTree:
        index = self._children_index()
        return tuple(self._assemble(comment, index) for comment in comments)

    def _created_status(self, pending: bool) -> ModerationStatus:
        return ModerationStatus.PENDING if pending else ModerationStatus.APPROVED

    # CommentRepository

    async def create_comment(self, lesson_id: LessonId, body: CommentBody) -> Comment:
        """Create a root comment; pending on moderated lessons."""
        now = self._clock()
        comment = Comment(
            id=CommentId(f"c{next(self._comment_ids)}"),
            lesson_id=lesson_id,
            user_id=self.author_id,
            body=body.root,
            created_at=now,
            updated_at=now,
            moderation_status=self._created_status(
                lesson_id in self._moderated_lessons
            ),
        )
        return self._store_comment(comment)

    async def create_reply(
        self,
        lesson_id: LessonId,
        comment_id: CommentId,
        parent_reply_id: ReplyId | None,
        body: CommentBody,
    ) -> Reply:
        """Create a reply.

        Raises:
            NotFoundError: If the comment or parent reply does not exist
            BusinessRuleViolationError: If replying to rejected content
        """
        comment = self._comments.get(comment_id)
        if comment is None or comment.lesson_id != lesson_id:
            raise NotFoundError("Comment", comment_id)
        if comment.moderation_status is ModerationStatus.REJECTED:
            raise BusinessRuleViolationError("Cannot reply to a rejected comment")

        parent = None
        if parent_reply_id is not None:
            parent = self._replies.get(parent_reply_id)
            if parent is None or parent.comment_id != comment_id:
                raise NotFoundError("Reply", parent_reply_id)
            if parent.moderation_status is ModerationStatus.REJECTED:
                raise BusinessRuleViolationError("Cannot reply to a rejected reply")

        pending = (
            lesson_id in self._moderated_lessons
            or comment.moderation_status is not ModerationStatus.APPROVED
            or (parent is not None and parent.pending_moderation)
        )
        now = self._clock()
        reply = Reply(
            id=ReplyId(f"r{next(self._reply_ids)}"),
            comment_id=comment_id,
            parent_reply_id=parent_reply_id,
            user_id=self.author_id,
            body=body.root,
            created_at=now,
            updated_at=now,
            moderation_status=self._created_status(pending),
        )
        return self._store_reply(reply)

    async def list_comments(self, lesson_id: LessonId) -> list[Comment]:
        """Full tree of a lesson, newest first at every level."""
        comments = [c for c in self._comments.values() if c.lesson_id == lesson_id]
        comments.sort(key=lambda c: self._sequence[c.id], reverse=True)
        return list(self._tree(comments))

    async def moderate_comment(
        self, comment_id: CommentId, action: ModerationAction
    ) -> Comment:
        """Approve or reject a root comment and cascade to its replies.

        Raises:
            NotFoundError: If the comment does not exist
            InvalidModerationTransitionError: If the transition is not allowed
        """
        comment = self._comments.get(comment_id)
        if comment is None:
            raise NotFoundError("Comment", comment_id)

        current = self._assemble(comment, self._children_index())
        updated = apply_action_to_subtree(
            current, action, self.moderator_id, self._clock()
        )
        self._store_subtree(updated)
        return updated

    async def moderate_reply(
        self, comment_id: CommentId, reply_id: ReplyId, action: ModerationAction
    ) -> Reply:
        """Approve or reject a reply and cascade to its descendants.

        Raises:
            NotFoundError: If the reply does not exist in that thread
            InvalidModerationTransitionError: If the transition is not allowed
        """
        reply = self._replies.get(reply_id)
        if reply is None or reply.comment_id != comment_id:
            raise NotFoundError("Reply", reply_id)

        current = self._assemble(reply, self._children_index())
        updated = apply_action_to_subtree(
            current, action, self.moderator_id, self._clock()
        )
        self._store_subtree(updated)
        return updated

    async def list_pending_moderation_items(
        self, filters: ModerationFilters
    ) -> list[ModerationQueueItem]:
        """Flattened rows, oldest thread first, parents before replies."""
        orphaned = [r for r in self._replies.values() if r.comment_id not in self._comments]
        for reply in orphaned:
            logfire.warn(
                "Orphaned reply without parent comment",
                reply_id=reply.id,
                comment_id=reply.comment_id,
            )

        comments = sorted(self._comments.values(), key=lambda c: self._sequence[c.id])
        context = ModerationContext(
            lessons=dict(self._lessons), user_display_names=dict(self._users)
        )
        items = build_moderation_queue(self._tree(comments), context, filters.status)

        start = (filters.page - 1) * filters.page_size
        return list(items[start : start + filters.page_size])
