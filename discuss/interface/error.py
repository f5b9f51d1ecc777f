"""Interface layer errors and user-facing error messages."""

from discuss.adapter.error import ServerError
from discuss.domain.error import (
    InvalidModerationTransitionError,
    MutationFailedError,
    ValidationError,
)

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


class InterfaceError(Exception):
    """Base interface error."""

    pass


def describe_error(exc: BaseException) -> str:
    """Message the display layer may show for a failed action.

    Validation failures and refused transitions carry their own message.
    For a failed mutation the server's message is preferred over the
    generic one when the server gave a reason.
    """
    if isinstance(exc, ValidationError):
        return str(exc)
    if isinstance(exc, InvalidModerationTransitionError):
        return f"This item is already {exc.current} and cannot be {exc.target}."
    if isinstance(exc, MutationFailedError):
        cause = exc.__cause__
        if isinstance(cause, ServerError) and cause.code != "NETWORK_ERROR":
            return cause.message
        return exc.message
    if isinstance(exc, ServerError):
        return exc.message
    return GENERIC_ERROR_MESSAGE
