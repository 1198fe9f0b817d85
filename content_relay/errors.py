"""Relay error taxonomy.

Every error carries the HTTP status and the caller-facing ``error`` string it
is rendered with. Relays raise these internally and hand them back as
``RelayErr`` at their boundary; nothing here is meant to reach the ASGI server.
"""


class RelayError(Exception):
    """Uncategorized relay failure, usually a transport-level exception."""

    status_code: int = 500
    error: str = "Proxy failed"

    def __init__(
        self,
        error: str | None = None,
        *,
        message: str | None = None,
        details: str | None = None,
        status_code: int | None = None,
    ) -> None:
        if error is not None:
            self.error = error
        if status_code is not None:
            self.status_code = status_code
        self.message = message
        self.details = details
        super().__init__(message or self.error)


class ConfigurationError(RelayError):
    error = "Server configuration error"


class InvalidRequestError(RelayError):
    status_code = 400
    error = "Invalid request body"


class UpstreamBlockedError(RelayError):
    status_code = 503
    error = "Upstream blocked"


class UpstreamFormatError(RelayError):
    error = "Proxy failed"


class UpstreamTimeoutError(RelayError):
    status_code = 504
    error = "Upstream timeout"


class UpstreamFetchError(RelayError):
    error = "Failed to fetch image"


class MissingParameterError(RelayError):
    status_code = 400
    error = "URL parameter is required"


class InvalidUrlError(RelayError):
    status_code = 400
    error = "Invalid URL"


class ForbiddenOriginError(RelayError):
    status_code = 403
    error = "Domain not allowed"
