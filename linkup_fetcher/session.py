"""High-level session manager for LinkUp API access.

This module provides the entry point callers should use instead of building
:class:`LinkupClient` by hand. It handles:
- Loading the persisted session token, logging in when there is none
- Persisting freshly issued tokens
- Renewing an expired token and retrying the failed fetch once

Usage:
    session = LinkupSession(http, authenticator, store)
    profile = await session.fetch("https://www.linkedin.com/in/someone/")
"""

from __future__ import annotations

import logging
from typing import Any

from .auth import LinkupAuthenticator
from .client import LinkupClient
from .credentials import CredentialStore
from .errors import LinkupSessionExpired
from .http import LinkupHttpClient
from .protocol import DEFAULT_COUNTRY

_LOGGER = logging.getLogger(__name__)

TOKEN_CREDENTIAL = "login-token"


class LinkupSession:
    """Own the session token and the client built around it."""

    def __init__(
        self,
        http: LinkupHttpClient,
        authenticator: LinkupAuthenticator,
        store: CredentialStore,
        *,
        country: str = DEFAULT_COUNTRY,
    ) -> None:
        self._http = http
        self._authenticator = authenticator
        self._store = store
        self._country = country
        self._client: LinkupClient | None = None

    @property
    def client(self) -> LinkupClient | None:
        """Client for the current token, if one has been built."""
        return self._client

    async def connect(self) -> LinkupClient:
        """Return a client for the stored token, logging in if none is stored."""
        if self._client is not None:
            return self._client

        token = self._store.get(TOKEN_CREDENTIAL)
        if token is None:
            _LOGGER.info("No stored session token, logging in")
            token = await self._login()
        else:
            _LOGGER.debug("Using stored session token")

        self._client = self._build_client(token)
        return self._client

    async def refresh(self) -> LinkupClient:
        """Log in again and replace the client with one for the new token."""
        token = await self._login()
        self._client = self._build_client(token)
        return self._client

    async def fetch(self, url: str) -> Any:
        """Fetch a resource, renewing the token once if it has expired.

        A second expiry, or any other failure, is raised unchanged.
        """
        client = await self.connect()
        try:
            return await client.fetch(url)
        except LinkupSessionExpired:
            _LOGGER.warning("Session token expired, logging in again")

        client = await self.refresh()
        return await client.fetch(url)

    async def _login(self) -> str:
        token = await self._authenticator.authenticate()
        self._store.set(TOKEN_CREDENTIAL, token)
        return token

    def _build_client(self, token: str) -> LinkupClient:
        return LinkupClient(self._http, token, country=self._country)
