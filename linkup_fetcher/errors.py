"""Client error types for LinkUp API interactions."""

from __future__ import annotations

import re

# Body fields whose values are credentials.
_SECRET_FIELDS = re.compile(
    r'("(?:login_token|password|code)"\s*:\s*)"(?:[^"\\]|\\.)*"'
)


def redact_body(body: str) -> str:
    """Mask credential values in a raw response body."""
    return _SECRET_FIELDS.sub(r'\1"***"', body)


class LinkupClientError(Exception):
    """Base error for LinkUp client failures."""


class LinkupTransportError(LinkupClientError):
    """Request failed before a response body could be interpreted."""


class LinkupTimeout(LinkupTransportError):
    """Timeout while communicating with the API."""


class LinkupConnectionError(LinkupTransportError):
    """Network connection to the API failed."""


class LinkupResponseError(LinkupTransportError):
    """HTTP response error from the API."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status


class LinkupSessionExpired(LinkupResponseError):
    """The session token was rejected (HTTP 403) and must be renewed."""

    def __init__(self, message: str = "Session token rejected by the API") -> None:
        super().__init__(403, message)


class LinkupApiError(LinkupClientError):
    """The API answered with a well-formed error envelope."""

    def __init__(self, message: str) -> None:
        super().__init__(f"API response is an error: {message}")
        self.message = message


class LinkupDecodeError(LinkupClientError):
    """The response body did not have the expected shape."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(
            "failed to parse response as expected type, "
            f"got status {status}: {redact_body(body)}"
        )
        self.status = status
        self.body = body


class LinkupInvalidUrl(LinkupClientError):
    """The resource URL could not be parsed."""

    def __init__(self, url: str) -> None:
        super().__init__(f"invalid URL: {url}")
        self.url = url


class LinkupUnknownResource(LinkupClientError):
    """The URL does not point at a resource this client can fetch."""

    def __init__(self, url: str) -> None:
        super().__init__(f"unknown resource: {url}")
        self.url = url


class LinkupAuthError(LinkupClientError):
    """The login handshake could not be completed."""


class LinkupCredentialStoreError(LinkupClientError):
    """Reading or writing the credential store failed."""


class LinkupConfigError(LinkupClientError):
    """Configuration could not be loaded."""


class LinkupNotConfiguredError(LinkupConfigError):
    """A required configuration variable has no value."""

    def __init__(self, variable: str) -> None:
        super().__init__(f"variable '{variable}' is not configured")
        self.variable = variable
