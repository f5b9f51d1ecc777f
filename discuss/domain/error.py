"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Submitted content failed validation before reaching the server."""

    pass


class BusinessRuleViolationError(DomainError):
    """Business rule violation error."""

    pass


class InvalidModerationTransitionError(BusinessRuleViolationError):
    """Raised when a moderation status change is not allowed."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move moderation status from {current} to {target}")


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class MutationFailedError(DomainError):
    """A submitted change was refused or lost; local state was rolled back.

    ``message`` is safe to show to the user. The underlying failure is
    available as ``__cause__``.
    """

    def __init__(self, message: str, operation: str):
        self.message = message
        self.operation = operation
        super().__init__(message)
