"""Exception hierarchy for jina_cli."""

from typing import Optional


class JinaError(Exception):
    """Base class for errors reported through the output envelope."""

    code: Optional[str] = None


class RequestConstructionError(JinaError):
    """Raised when an outbound request cannot be built (bad URL, bad scheme)."""

    code = "REQUEST_ERROR"


class TransportError(JinaError):
    """Raised on DNS, connection, or timeout failures."""

    code = "TRANSPORT_ERROR"


class HTTPStatusError(JinaError):
    """
    Raised when the API answers with a non-2xx status.

    Attributes:
        status_code: HTTP status code returned by the API
        body: Response body, truncated to MAX_BODY_SNIPPET characters
    """

    code = "HTTP_ERROR"
    MAX_BODY_SNIPPET = 500

    def __init__(self, status_code: int, body: str = ""):
        if len(body) > self.MAX_BODY_SNIPPET:
            body = body[: self.MAX_BODY_SNIPPET] + "..."
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP error: {status_code}, response: {body}")


class ConfigError(JinaError):
    """Raised for unknown configuration keys or invalid values."""

    code = "CONFIG_ERROR"


class UsageError(JinaError):
    """Raised for invalid flag combinations the parser cannot express."""

    code = "USAGE_ERROR"
