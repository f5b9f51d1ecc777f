"""Application entry point for embedding the discussion client."""

from dishka import AsyncContainer

from discuss.config import Settings
from discuss.util.di.container import create_container
from discuss.util.logging import setup_logging
from discuss.util.observability import configure_logfire


def create_app(settings: Settings | None = None) -> AsyncContainer:
    """Configure logging and observability, then build the container.

    Open a lesson with ``open_thread(container, lesson_id)`` and close the
    container on shutdown so the HTTP client is released.

    Args:
        settings: Settings used for logging setup (loaded from env when None)

    Returns:
        Production DI container
    """
    settings = settings or Settings()

    setup_logging(settings)
    configure_logfire(settings)

    return create_container()
