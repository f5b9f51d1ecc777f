"""Moderate comment use case."""

import logfire
from pydantic import BaseModel

from discuss.application.cache import CommentCache, ModerationQueueCache
from discuss.application.optimistic import run_optimistic
from discuss.application.usecase.base import BaseUseCase
from discuss.domain.model.comment import CommentTree, Node
from discuss.domain.model.moderation import ModerationQueueItem
from discuss.domain.service import (
    CommentService,
    apply_action_to_subtree,
    apply_moderated_node,
    find_node,
    remove_moderated_items,
    remove_queue_item,
    transition,
)
from discuss.domain.value import (
    CommentId,
    ModerationAction,
    ModerationStatus,
    ModerationTarget,
    ReplyId,
)

from .get_moderation_queue import GetModerationQueueRequest, GetModerationQueueUseCase


class ModerateCommentRequest(BaseModel):
    """Moderate comment request.

    ``reply_id`` absent means the root comment itself is moderated. The
    queue page to update is described by the same fields as
    ``GetModerationQueueRequest``.
    """

    comment_id: str
    reply_id: str | None = None
    action: ModerationAction
    queue: GetModerationQueueRequest = GetModerationQueueRequest()


class ModerateCommentResponse(BaseModel):
    """Moderate comment response."""

    target: ModerationTarget
    moderation_status: ModerationStatus
    node: Node


class ModerateCommentUseCase(BaseUseCase):
    """Use case for approving or rejecting a comment or reply."""

    def __init__(
        self,
        comment_service: CommentService,
        queue_cache: ModerationQueueCache,
        comment_cache: CommentCache,
        get_moderation_queue_use_case: GetModerationQueueUseCase,
    ) -> None:
        """Initialize moderate comment use case.

        Args:
            comment_service: Comment domain service
            queue_cache: Cache of moderation rows per filter set
            comment_cache: Cache of comment trees per lesson
            get_moderation_queue_use_case: Refresh used to settle the queue
        """
        self.comment_service = comment_service
        self.queue_cache = queue_cache
        self.comment_cache = comment_cache
        self.get_moderation_queue_use_case = get_moderation_queue_use_case

    def _current_status(self, target: ModerationTarget) -> ModerationStatus | None:
        """Best local knowledge of the target's status, None if unknown."""
        item = self.queue_cache.find(target.entity_id)
        if item is not None:
            return item.moderation_status
        for cell in self.comment_cache.cells_with_comment(target.comment_id):
            node = find_node(cell.value, target.comment_id, target.reply_id)
            if node is not None:
                return node.moderation_status
        return None

    def _update_lesson_trees(
        self, target: ModerationTarget, action: ModerationAction, moderated: Node
    ) -> None:
        """Swap the moderated node into cached trees and cascade to its replies.

        The server may answer with the node alone, so descendants already in
        the cache get the same decision applied locally.
        """

        def apply(tree: CommentTree) -> CommentTree:
            tree = apply_moderated_node(tree, target, moderated)
            current = find_node(tree, target.comment_id, target.reply_id)
            if current is None:
                return tree
            cascaded = apply_action_to_subtree(
                current,
                action,
                moderated.moderated_by_id,
                moderated.moderated_at or moderated.updated_at,
            )
            if cascaded is current:
                return tree
            return apply_moderated_node(tree, target, cascaded)

        for cell in list(self.comment_cache.cells_with_comment(target.comment_id)):
            cell.update(apply)

    async def execute(self, request: ModerateCommentRequest) -> ModerateCommentResponse:
        """Execute moderation flow.

        Steps:
        1. Check the transition against the locally known status
        2. Remove the row from the queue page
        3. Ask the server to moderate the node
        4. On failure put the queue page back as it was
        5. On success update the node and its descendants in any cached
           lesson tree, and drop queue rows the cascade made stale
        6. Refresh the queue page

        Args:
            request: Target, action and queue page

        Returns:
            The moderated node

        Raises:
            InvalidModerationTransitionError: If the transition is not allowed
            MutationFailedError: If the server call fails
        """
        target = ModerationTarget(
            comment_id=CommentId(request.comment_id),
            reply_id=ReplyId(request.reply_id) if request.reply_id else None,
        )

        current = self._current_status(target)
        if current is not None:
            transition(current, request.action.target_status)

        filters = self.get_moderation_queue_use_case.filters_for(request.queue)

        def reconcile(
            queue: tuple[ModerationQueueItem, ...], moderated: Node
        ) -> tuple[ModerationQueueItem, ...]:
            self._update_lesson_trees(target, request.action, moderated)
            return remove_moderated_items(queue, moderated)

        with logfire.span(
            "moderate_comment",
            comment_id=target.comment_id,
            reply_id=target.reply_id,
            action=request.action.value,
        ):
            node = await run_optimistic(
                self.queue_cache.cell(filters),
                operation=f"moderate_{target.type.value}",
                propose=lambda queue: remove_queue_item(queue, target.entity_id),
                submit=lambda: self.comment_service.moderate(target, request.action),
                reconcile=reconcile,
                refresh=lambda: self.get_moderation_queue_use_case.execute(
                    request.queue
                ),
                failure_message="Could not moderate this comment. Please try again.",
            )

        return ModerateCommentResponse(
            target=target, moderation_status=node.moderation_status, node=node
        )
