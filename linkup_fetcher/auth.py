"""Login handshake against the LinkUp authentication endpoints.

The handshake has at most two round trips:

    START --login--> DONE                       (token returned directly)
    START --login--> AWAITING_CODE --verify--> DONE
    any step error -> FAILED

Nothing here retries. Re-authentication after a token expires is driven by
:class:`linkup_fetcher.session.LinkupSession`.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from .errors import LinkupAuthError, LinkupNotConfiguredError
from .http import LinkupHttpClient
from .protocol import (
    DEFAULT_COUNTRY,
    GotToken,
    LoginResult,
    build_login_body,
    build_verify_body,
    parse_login_response,
    parse_verify_response,
)

_LOGGER = logging.getLogger(__name__)

# Receives the API's message and returns the code the user entered.
CodeProvider = Callable[[str], Awaitable[str] | str]


async def login(
    http: LinkupHttpClient,
    email: str,
    password: str,
    *,
    country: str = DEFAULT_COUNTRY,
) -> LoginResult:
    """Start a session with email and password."""
    status, body = await http.post(
        "/auth/login",
        build_login_body(email=email, password=password, country=country),
    )
    return parse_login_response(status, body)


async def verify(
    http: LinkupHttpClient,
    email: str,
    code: str,
    *,
    country: str = DEFAULT_COUNTRY,
) -> str:
    """Complete a session with the verification code and return the token."""
    status, body = await http.post(
        "/auth/verify",
        build_verify_body(email=email, code=code, country=country),
    )
    return parse_verify_response(status, body)


class AuthState(Enum):
    """Handshake states."""

    START = "start"
    AWAITING_CODE = "awaiting_code"
    DONE = "done"
    FAILED = "failed"


class LinkupAuthenticator:
    """Drive the login/verify handshake and produce a session token."""

    def __init__(
        self,
        http: LinkupHttpClient,
        email: str | None,
        password: str | None,
        code_provider: CodeProvider,
        *,
        country: str = DEFAULT_COUNTRY,
    ) -> None:
        self._http = http
        self._email = email
        self._password = password
        self._code_provider = code_provider
        self._country = country
        self._state = AuthState.START
        self._message: str | None = None

    @property
    def state(self) -> AuthState:
        """Get current handshake state."""
        return self._state

    @property
    def message(self) -> str | None:
        """Last message returned by the API during the handshake."""
        return self._message

    async def authenticate(self) -> str:
        """Run the handshake from the start and return a fresh token.

        Raises:
            LinkupClientError: Any transport, API or decode failure. The
                handshake is left in the FAILED state.
        """
        self._state = AuthState.START
        self._message = None
        try:
            return await self._run()
        except Exception:
            self._state = AuthState.FAILED
            raise

    async def _run(self) -> str:
        email, password = self._email, self._password
        if not email:
            raise LinkupNotConfiguredError("linkedin-email")
        if not password:
            raise LinkupNotConfiguredError("linkedin-password")

        _LOGGER.debug("Logging in")
        result = await login(self._http, email, password, country=self._country)
        self._message = result.message

        if isinstance(result, GotToken):
            _LOGGER.info("Login succeeded without verification")
            self._state = AuthState.DONE
            return result.login_token

        self._state = AuthState.AWAITING_CODE
        _LOGGER.info("Login requires a verification code: %s", result.message)

        code = self._code_provider(result.message)
        if inspect.isawaitable(code):
            code = await code
        code = code.strip()
        if not code:
            raise LinkupAuthError("verification code is required")

        token = await verify(self._http, email, code, country=self._country)
        _LOGGER.info("Verification code accepted")
        self._state = AuthState.DONE
        return token
