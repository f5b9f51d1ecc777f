"""Comment server infrastructure providers."""

from collections.abc import AsyncIterator

import httpx
import logfire
from dishka import Scope, provide

from discuss.adapter.academy import HttpCommentRepository
from discuss.config import ServerSettings
from discuss.domain.repository import CommentRepository
from discuss.util.di.base import ProviderBase
from discuss.util.observability import instrument_httpx


class ServerProvider(ProviderBase):
    """Comment server component base."""

    __mock_component__ = "server"


class ProdServerProvider(ServerProvider):
    """Production comment server provider (HTTP API)."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_http_client(
        self, server_settings: ServerSettings
    ) -> AsyncIterator[httpx.AsyncClient]:
        """Provide HTTP client for the comment server.

        Closed when the container is closed.
        """
        async with httpx.AsyncClient(
            base_url=server_settings.base_url,
            timeout=server_settings.timeout_seconds,
        ) as client:
            instrument_httpx(client)
            logfire.info("Comment server client opened", base_url=server_settings.base_url)
            yield client

    @provide(scope=Scope.APP)
    def get_comment_repository(
        self, client: httpx.AsyncClient, server_settings: ServerSettings
    ) -> CommentRepository:
        """Provide HTTP comment repository."""
        return HttpCommentRepository(
            client=client, access_token=server_settings.access_token
        )
