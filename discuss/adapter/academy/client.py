"""HTTP client for the academy comment endpoints.

Every endpoint answers with an envelope::

    {"success": true, "data": ..., "timestamp": "..."}
    {"success": false, "error": {"code": "...", "message": "..."}, "timestamp": "..."}
"""

from typing import Any

import httpx
import logfire

from discuss.adapter.error import ServerError
from discuss.domain.model.comment import Comment, Reply
from discuss.domain.model.moderation import ModerationQueueItem
from discuss.domain.repository import CommentRepository
from discuss.domain.service.normalization import normalize_comment, normalize_reply
from discuss.domain.value import (
    CommentBody,
    CommentId,
    LessonId,
    ModerationAction,
    ModerationFilters,
    ReplyId,
)


def unwrap(response: httpx.Response) -> Any:
    """Return ``data`` from a success envelope.

    Raises:
        ServerError: If the body is not an envelope or reports a failure
    """
    try:
        payload = response.json()
    except ValueError:
        logfire.error(
            "Comment server returned a non-JSON body",
            status_code=response.status_code,
            url=str(response.request.url),
        )
        raise ServerError(
            "INVALID_RESPONSE",
            "Unexpected response from server",
            response.status_code,
        )

    if not isinstance(payload, dict) or payload.get("success") is not True:
        error = payload.get("error") if isinstance(payload, dict) else None
        error = error if isinstance(error, dict) else {}
        code = error.get("code") or "UNKNOWN"
        message = error.get("message") or "Unknown error"
        logfire.warn(
            "Comment server request failed",
            status_code=response.status_code,
            code=code,
            url=str(response.request.url),
        )
        raise ServerError(code, message, response.status_code)

    return payload.get("data")


class HttpCommentRepository(CommentRepository):
    """Comment repository backed by the academy REST API."""

    def __init__(
        self, client: httpx.AsyncClient, access_token: str | None = None
    ) -> None:
        """Initialize HTTP comment repository.

        Args:
            client: Shared HTTP client; ``base_url`` and timeout are set on it
            access_token: Bearer token, if the API requires one
        """
        self.client = client
        self.access_token = access_token

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self.client.request(
                method, path, json=json, params=params, headers=self._headers()
            )
        except httpx.HTTPError as e:
            logfire.error(
                "Comment server HTTP error", method=method, path=path, error=str(e)
            )
            raise ServerError("NETWORK_ERROR", "Could not reach the server") from e

        return unwrap(response)

    async def create_comment(self, lesson_id: LessonId, body: CommentBody) -> Comment:
        """Create a root comment via POST /academy/lessons/{id}/comments."""
        data = await self._request(
            "POST",
            f"/academy/lessons/{lesson_id}/comments",
            json={"body": body.root},
        )
        return normalize_comment(data or {})

    async def create_reply(
        self,
        lesson_id: LessonId,
        comment_id: CommentId,
        parent_reply_id: ReplyId | None,
        body: CommentBody,
    ) -> Reply:
        """Create a reply via POST .../comments/{id}/replies."""
        data = await self._request(
            "POST",
            f"/academy/lessons/{lesson_id}/comments/{comment_id}/replies",
            json={"body": body.root, "parentReplyId": parent_reply_id},
        )
        return normalize_reply(data or {}, comment_id)

    async def list_comments(self, lesson_id: LessonId) -> list[Comment]:
        """List the comment tree via GET /academy/lessons/{id}/comments."""
        data = await self._request("GET", f"/academy/lessons/{lesson_id}/comments")
        return [normalize_comment(item) for item in data or []]

    async def moderate_comment(
        self, comment_id: CommentId, action: ModerationAction
    ) -> Comment:
        """Moderate a comment via PATCH /admin/academy/comments/{id}/moderation."""
        data = await self._request(
            "PATCH",
            f"/admin/academy/comments/{comment_id}/moderation",
            json={"status": action.target_status.value},
        )
        return normalize_comment(data or {})

    async def moderate_reply(
        self, comment_id: CommentId, reply_id: ReplyId, action: ModerationAction
    ) -> Reply:
        """Moderate a reply via PATCH .../replies/{id}/moderation."""
        data = await self._request(
            "PATCH",
            f"/admin/academy/comments/{comment_id}/replies/{reply_id}/moderation",
            json={"status": action.target_status.value},
        )
        return normalize_reply(data or {}, comment_id)

    async def list_pending_moderation_items(
        self, filters: ModerationFilters
    ) -> list[ModerationQueueItem]:
        """List queue rows via GET /admin/academy/comments/moderation."""
        data = await self._request(
            "GET",
            "/admin/academy/comments/moderation",
            params={
                "status": filters.status.value,
                "page": filters.page,
                "pageSize": filters.page_size,
            },
        )
        return [ModerationQueueItem.model_validate(item) for item in data or []]
