"""
Application errors for the fallback search pipeline.

Source adapters raise a SourceError subclass and nothing else. The resolver
absorbs primary/web failures and turns a generative failure into
AllSourcesExhaustedError, which the API maps to 500 with a user-facing message.
"""


class SourceError(Exception):
    """Base for failures raised by a source adapter."""

    def __init__(self, message: str, source: str = "") -> None:
        self.message = message
        self.source = source
        super().__init__(message)


class NotConfiguredError(SourceError):
    """Raised when an adapter is missing its credentials or endpoint."""


class UpstreamUnavailableError(SourceError):
    """Raised on transport failure or a non-success response from the upstream service."""

    def __init__(self, message: str, source: str = "", status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message, source)


class UpstreamProtocolError(SourceError):
    """Raised when an upstream response cannot be read in the expected shape."""


class AllSourcesExhaustedError(Exception):
    """Raised when the terminal (generative) fallback fails and nothing is left to try."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
