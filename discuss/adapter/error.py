"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class ServerError(AdapterError):
    """The comment server refused a request or could not be reached.

    ``code`` is the server's error code (or a local one for transport
    failures); ``message`` is safe to show to the user.
    """

    def __init__(self, code: str, message: str, status_code: int | None = None):
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(f"{code}: {message}")
