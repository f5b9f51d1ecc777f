"""Errors raised while wiring the library together.

These are startup problems with settings or provider selection. They are
kept apart from ``DomainError`` because no discussion operation has run yet.
"""


class SetupError(Exception):
    """Base for errors raised before any thread is opened."""


class ConfigurationError(SetupError):
    """Settings are inconsistent, such as logfire sending without a token."""


class DependencyInjectionError(SetupError):
    """No provider is registered for a requested component and mode."""
