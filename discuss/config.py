"""Application configuration."""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from discuss.domain.value import ModerationStatus


class ServerSettings(BaseModel):
    """Comment server (API) configuration."""

    base_url: str = "http://localhost:3000/api"

    # Bearer token sent with every request (optional)
    # Can be set via SERVER__ACCESS_TOKEN env var
    access_token: str | None = None

    timeout_seconds: float = 30.0


class ThreadSettings(BaseModel):
    """Thread display and submission limits."""

    # Replies at depth >= max_depth - 1 are not offered a reply action
    # Structural depth is not limited
    max_depth: int = Field(default=3, ge=1)

    # Form-layer limit on comment and reply bodies
    max_body_length: int = Field(default=800, ge=1)


class ModerationSettings(BaseModel):
    """Moderation queue defaults."""

    default_status: ModerationStatus = ModerationStatus.PENDING
    page_size: int = Field(default=20, ge=1, le=100)


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Logfire API token (optional - if not set, logs only go to console)
    # Can be set via OBSERVABILITY__LOGFIRE_TOKEN env var
    logfire_token: str | None = None

    # Whether to send telemetry to Logfire cloud
    # If None, will auto-determine: sends if token is present, otherwise console-only
    send_to_logfire: bool | None = None


class Settings(BaseSettings):
    """Application settings.

    Set environment variables to override, using ``__`` for nesting:

        SERVER__BASE_URL=https://portal.example.com/api
        SERVER__ACCESS_TOKEN=...
        THREAD__MAX_DEPTH=4
        ENVIRONMENT=production
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows SERVER__BASE_URL syntax
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    # Nested settings
    server: ServerSettings = ServerSettings()
    thread: ThreadSettings = ThreadSettings()
    moderation: ModerationSettings = ModerationSettings()
    observability: ObservabilitySettings = ObservabilitySettings()
