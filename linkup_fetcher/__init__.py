"""LinkUp API client for LinkedIn profiles, companies, messages and connections."""

__version__ = "0.1.0"

from .auth import AuthState, LinkupAuthenticator, login, verify
from .client import LinkupClient
from .credentials import CredentialStore, FileCredentialStore
from .errors import (
    LinkupApiError,
    LinkupAuthError,
    LinkupClientError,
    LinkupConfigError,
    LinkupConnectionError,
    LinkupCredentialStoreError,
    LinkupDecodeError,
    LinkupInvalidUrl,
    LinkupNotConfiguredError,
    LinkupResponseError,
    LinkupSessionExpired,
    LinkupTimeout,
    LinkupTransportError,
    LinkupUnknownResource,
)
from .http import LinkupHttpClient
from .protocol import GotToken, InboxPage, LoginResult, NeedCode
from .session import LinkupSession

__all__ = [
    "AuthState",
    "CredentialStore",
    "FileCredentialStore",
    "GotToken",
    "InboxPage",
    "LinkupApiError",
    "LinkupAuthError",
    "LinkupAuthenticator",
    "LinkupClient",
    "LinkupClientError",
    "LinkupConfigError",
    "LinkupConnectionError",
    "LinkupCredentialStoreError",
    "LinkupDecodeError",
    "LinkupHttpClient",
    "LinkupInvalidUrl",
    "LinkupNotConfiguredError",
    "LinkupResponseError",
    "LinkupSession",
    "LinkupSessionExpired",
    "LinkupTimeout",
    "LinkupTransportError",
    "LinkupUnknownResource",
    "LoginResult",
    "NeedCode",
    "__version__",
    "login",
    "verify",
]
