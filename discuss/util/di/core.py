"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from discuss.config import ModerationSettings, ServerSettings, Settings, ThreadSettings
from discuss.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    scope = Scope.APP

    @provide
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide
    def provide_server_settings(self, settings: Settings) -> ServerSettings:
        return settings.server

    @provide
    def provide_thread_settings(self, settings: Settings) -> ThreadSettings:
        return settings.thread

    @provide
    def provide_moderation_settings(self, settings: Settings) -> ModerationSettings:
        return settings.moderation
