"""Exception hierarchy shared by the article feed and ownership pipeline."""


class FinfeedError(Exception):
    """Base class for all finfeed errors."""


class ConfigurationError(FinfeedError, ValueError):
    """A required server setting (usually a credential) is missing."""


class UpstreamError(FinfeedError):
    """An external API returned a failed or malformed response.

    Args:
        message: Human-readable description, including the upstream status.
        status_code: HTTP status of the upstream response, if one was received.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
