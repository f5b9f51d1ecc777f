"""Observability configuration using Logfire.

Usage:
    import logfire

    logfire.info("Reply created", reply_id=reply.id, comment_id=comment_id)

    with logfire.span("post_reply", lesson_id=lesson_id):
        ...
"""

import logfire

from discuss.config import Settings
from discuss.util.error import ConfigurationError


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for the discussion client.

    Telemetry is sent to Logfire cloud when explicitly enabled, or when a
    token is present and sending is not explicitly disabled. Otherwise logs
    only go to the console.

    Args:
        settings: Application settings

    Raises:
        ConfigurationError: If sending is enabled without a token
    """
    observability = settings.observability
    if observability.send_to_logfire is not None:
        send_to_logfire = observability.send_to_logfire
    else:
        send_to_logfire = bool(observability.logfire_token)

    if send_to_logfire and not observability.logfire_token:
        raise ConfigurationError(
            "OBSERVABILITY__SEND_TO_LOGFIRE is set but no Logfire token is configured"
        )

    config_kwargs = {
        "service_name": "discuss-client",
        "service_version": "0.1.0",
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    }
    if observability.logfire_token:
        config_kwargs["token"] = observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
    )


def instrument_httpx(client=None) -> None:
    """Trace outbound requests to the comment server.

    Args:
        client: Instrument only this client (all clients when None)
    """
    if client is None:
        logfire.instrument_httpx()
    else:
        logfire.instrument_httpx(client)
    logfire.info("httpx instrumented")
