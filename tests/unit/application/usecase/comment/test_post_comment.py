"""Unit tests for PostCommentUseCase."""

from unittest.mock import AsyncMock

import pytest

from discuss.adapter.error import ServerError
from discuss.application.cache import CommentCache
from discuss.application.usecase.comment import (
    GetCommentsRequest,
    GetCommentsUseCase,
    PostCommentRequest,
    PostCommentUseCase,
)
from discuss.domain.error import MutationFailedError, ValidationError
from discuss.domain.value import LessonId, ModerationStatus, is_provisional
from discuss.persistence.repository.inmemory import InMemoryCommentRepository
from tests.harness import create_env_fixture

unit_env = create_env_fixture()

LESSON = LessonId("L1")


class TestPostComment:
    """Tests for PostCommentUseCase."""

    @pytest.mark.asyncio
    async def test_provisional_comment_replaced_by_server_comment(self, unit_env):
        use_case = await unit_env.get(PostCommentUseCase)
        cache = await unit_env.get(CommentCache)
        states = []
        cache.cell(LESSON).subscribe(states.append)

        response = await use_case.execute(
            PostCommentRequest(lesson_id=LESSON, body="  Hello class  ", author_id="u7")
        )

        proposed = states[0][0]
        assert is_provisional(proposed.id)
        assert proposed.moderation_status is ModerationStatus.PENDING
        assert proposed.body == "Hello class"
        assert proposed.user_id == "u7"

        assert response.provisional_id == proposed.id
        assert response.comment.id == "c1"
        assert [c.id for c in cache.get(LESSON)] == ["c1"]

    @pytest.mark.asyncio
    async def test_new_comment_is_first(self, unit_env):
        use_case = await unit_env.get(PostCommentUseCase)
        cache = await unit_env.get(CommentCache)

        await use_case.execute(PostCommentRequest(lesson_id=LESSON, body="first"))
        await use_case.execute(PostCommentRequest(lesson_id=LESSON, body="second"))

        assert [c.body for c in cache.get(LESSON)] == ["second", "first"]

    @pytest.mark.asyncio
    async def test_blank_body_never_reaches_cache(self, unit_env):
        use_case = await unit_env.get(PostCommentUseCase)
        cache = await unit_env.get(CommentCache)
        states = []
        cache.cell(LESSON).subscribe(states.append)

        with pytest.raises(ValidationError):
            await use_case.execute(PostCommentRequest(lesson_id=LESSON, body="   "))

        assert states == []

    @pytest.mark.asyncio
    async def test_too_long_body_rejected(self, unit_env):
        use_case = await unit_env.get(PostCommentUseCase)

        with pytest.raises(ValidationError):
            await use_case.execute(PostCommentRequest(lesson_id=LESSON, body="x" * 801))

    @pytest.mark.asyncio
    async def test_server_failure_rolls_back(self, unit_env):
        use_case = await unit_env.get(PostCommentUseCase)
        get_comments = await unit_env.get(GetCommentsUseCase)
        cache = await unit_env.get(CommentCache)
        repository = await unit_env.get(InMemoryCommentRepository)

        await use_case.execute(PostCommentRequest(lesson_id=LESSON, body="existing"))
        await get_comments.execute(GetCommentsRequest(lesson_id=LESSON))
        before = cache.get(LESSON)

        repository.create_comment = AsyncMock(
            side_effect=ServerError("INTERNAL_ERROR", "Database unavailable", 500)
        )

        with pytest.raises(MutationFailedError) as exc_info:
            await use_case.execute(PostCommentRequest(lesson_id=LESSON, body="lost"))

        assert exc_info.value.message.startswith("Could not publish")
        assert isinstance(exc_info.value.__cause__, ServerError)
        assert [c.id for c in cache.get(LESSON)] == [c.id for c in before]
        assert not any(is_provisional(c.id) for c in cache.get(LESSON))
