"""Marker base for domain services."""


class Service:
    """Domain logic that holds a comment repository.

    Pure tree and moderation rules are module-level functions in this
    package; only code that talks to the server subclasses ``Service``.
    """
