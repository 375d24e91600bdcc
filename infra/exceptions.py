"""
Transport-level exceptions raised by collaborator clients.
"""


class ServiceConnectionError(ConnectionError):
    """A collaborator service could not be reached."""

    def __init__(self, service: str, message: str, hint: str | None = None) -> None:
        self.service = service
        self.hint = hint
        super().__init__(f"{service}: {message}")


class ServiceUnavailableError(ServiceConnectionError):
    """Service answered but is temporarily unavailable (429 / 5xx)."""
    pass


class ApiError(RuntimeError):
    """Service answered with a non-success status."""

    def __init__(self, service: str, status: int, body: object = None) -> None:
        self.service = service
        self.status = status
        self.body = body
        super().__init__(f"{service}: HTTP {status} - {body!r}")


class GenerationError(RuntimeError):
    """The chat endpoint answered with an error."""
    pass
