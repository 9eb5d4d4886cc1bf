"""HTTP client for LinkUp API endpoints."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from .errors import (
    LinkupConnectionError,
    LinkupSessionExpired,
    LinkupTimeout,
)
from .protocol import API_BASE_URL

_LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


class LinkupHttpClient:
    """HTTP client wrapper for LinkUp API endpoints.

    Every call is a JSON POST authenticated by the static ``x-api-key``
    header. The client returns the raw status and body; interpreting the
    envelope is left to :mod:`linkup_fetcher.protocol`.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: str,
        *,
        base_url: str = API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float | None = None,
    ) -> None:
        self._session = session
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout, connect=connect_timeout)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self._base_url!r})"

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _headers(self) -> dict[str, str]:
        return {"x-api-key": self._api_key}

    async def post(self, path: str, body: dict[str, Any]) -> tuple[int, str]:
        """POST a JSON body to an API endpoint.

        Args:
            path: Endpoint path relative to the API base URL (e.g. "/auth/login").
            body: JSON-serializable request body.

        Returns:
            Tuple of HTTP status and response body text.

        Raises:
            LinkupSessionExpired: If the API answers 403 (token expired).
            LinkupTimeout: If the request times out.
            LinkupConnectionError: If the network request fails.
        """
        url = self._url(path)
        _LOGGER.debug("Requesting %s", url)
        try:
            async with self._session.post(
                url,
                json=body,
                headers=self._headers(),
                timeout=self._timeout,
            ) as resp:
                if resp.status == 403:
                    raise LinkupSessionExpired(f"Request to {path} was rejected (403)")
                text = await resp.text()
                return resp.status, text
        except TimeoutError as err:
            raise LinkupTimeout(f"Request to {path} timed out") from err
        except aiohttp.ClientError as err:
            raise LinkupConnectionError(f"Request to {path} failed") from err
