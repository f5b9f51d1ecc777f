"""Facade the display layer drives a single lesson discussion through."""

from collections.abc import Callable

from dishka import AsyncContainer

from discuss.application.cache import CommentCache, ModerationQueue, ModerationQueueCache
from discuss.application.usecase.comment import (
    GetCommentsRequest,
    GetCommentsUseCase,
    PostCommentRequest,
    PostCommentUseCase,
    PostReplyRequest,
    PostReplyUseCase,
)
from discuss.application.usecase.moderation import (
    GetModerationQueueRequest,
    GetModerationQueueUseCase,
    ModerateCommentRequest,
    ModerateCommentUseCase,
)
from discuss.config import ThreadSettings
from discuss.domain.model.comment import Comment, CommentTree, Node, Reply
from discuss.domain.value import LessonId, ModerationAction, UserId

from .view import ThreadNodeView, build_thread_view


class CommentThreadFacade:
    """Callbacks and data for one lesson's discussion.

    Every action is a coroutine. Failures surface as exceptions that
    ``describe_error`` turns into a displayable message.
    """

    def __init__(
        self,
        lesson_id: LessonId,
        *,
        get_comments_use_case: GetCommentsUseCase,
        post_comment_use_case: PostCommentUseCase,
        post_reply_use_case: PostReplyUseCase,
        get_moderation_queue_use_case: GetModerationQueueUseCase,
        moderate_comment_use_case: ModerateCommentUseCase,
        comment_cache: CommentCache,
        queue_cache: ModerationQueueCache,
        thread_settings: ThreadSettings,
        author_id: UserId | None = None,
        allow_moderation: bool = False,
        queue_request: GetModerationQueueRequest | None = None,
    ) -> None:
        self.lesson_id = lesson_id
        self.get_comments_use_case = get_comments_use_case
        self.post_comment_use_case = post_comment_use_case
        self.post_reply_use_case = post_reply_use_case
        self.get_moderation_queue_use_case = get_moderation_queue_use_case
        self.moderate_comment_use_case = moderate_comment_use_case
        self.comment_cache = comment_cache
        self.queue_cache = queue_cache
        self.thread_settings = thread_settings
        self.author_id = author_id
        self.allow_moderation = allow_moderation
        self.queue_request = queue_request or GetModerationQueueRequest()

    @property
    def tree(self) -> CommentTree:
        """Current cached tree of the lesson."""
        return self.comment_cache.get(self.lesson_id)

    @property
    def queue(self) -> ModerationQueue:
        """Current cached moderation page."""
        filters = self.get_moderation_queue_use_case.filters_for(self.queue_request)
        return self.queue_cache.get(filters)

    def view(self) -> tuple[ThreadNodeView, ...]:
        """Current tree projected for display."""
        return build_thread_view(
            self.tree, self.thread_settings.max_depth, self.allow_moderation
        )

    def subscribe(self, listener: Callable[[CommentTree], None]) -> Callable[[], None]:
        """Be notified whenever the lesson's tree changes."""
        return self.comment_cache.cell(self.lesson_id).subscribe(listener)

    async def load(self) -> CommentTree:
        """Fetch the lesson's tree from the server."""
        response = await self.get_comments_use_case.execute(
            GetCommentsRequest(lesson_id=self.lesson_id)
        )
        return response.comments

    async def load_queue(self) -> ModerationQueue:
        """Fetch the configured moderation page from the server."""
        response = await self.get_moderation_queue_use_case.execute(
            self.queue_request
        )
        return response.items

    async def submit_comment(self, body: str) -> Comment:
        """Publish a root comment."""
        response = await self.post_comment_use_case.execute(
            PostCommentRequest(
                lesson_id=self.lesson_id, body=body, author_id=self.author_id
            )
        )
        return response.comment

    async def submit_reply(
        self, root_comment_id: str, parent_id: str, body: str
    ) -> Reply:
        """Publish a reply.

        A ``parent_id`` equal to ``root_comment_id`` replies to the root
        comment itself.
        """
        parent_reply_id = None if parent_id == root_comment_id else parent_id
        response = await self.post_reply_use_case.execute(
            PostReplyRequest(
                lesson_id=self.lesson_id,
                comment_id=root_comment_id,
                parent_reply_id=parent_reply_id,
                body=body,
                author_id=self.author_id,
            )
        )
        return response.reply

    async def moderate(
        self, comment_id: str, reply_id: str | None, action: ModerationAction
    ) -> Node:
        """Approve or reject a comment (``reply_id`` None) or a reply."""
        response = await self.moderate_comment_use_case.execute(
            ModerateCommentRequest(
                comment_id=comment_id,
                reply_id=reply_id,
                action=action,
                queue=self.queue_request,
            )
        )
        return response.node

    async def approve(self, comment_id: str, reply_id: str | None = None) -> Node:
        return await self.moderate(comment_id, reply_id, ModerationAction.APPROVE)

    async def reject(self, comment_id: str, reply_id: str | None = None) -> Node:
        return await self.moderate(comment_id, reply_id, ModerationAction.REJECT)


async def open_thread(
    container: AsyncContainer,
    lesson_id: str,
    author_id: str | None = None,
    allow_moderation: bool = False,
    queue_request: GetModerationQueueRequest | None = None,
) -> CommentThreadFacade:
    """Build a facade for ``lesson_id`` from the container's components.

    Args:
        container: Application DI container
        lesson_id: Lesson whose discussion is shown
        author_id: Current user, if known
        allow_moderation: Whether the viewer may moderate
        queue_request: Moderation page the facade keeps in sync

    Returns:
        Facade sharing the container's caches
    """
    return CommentThreadFacade(
        LessonId(lesson_id),
        get_comments_use_case=await container.get(GetCommentsUseCase),
        post_comment_use_case=await container.get(PostCommentUseCase),
        post_reply_use_case=await container.get(PostReplyUseCase),
        get_moderation_queue_use_case=await container.get(GetModerationQueueUseCase),
        moderate_comment_use_case=await container.get(ModerateCommentUseCase),
        comment_cache=await container.get(CommentCache),
        queue_cache=await container.get(ModerationQueueCache),
        thread_settings=await container.get(ThreadSettings),
        author_id=UserId(author_id) if author_id else None,
        allow_moderation=allow_moderation,
        queue_request=queue_request,
    )
