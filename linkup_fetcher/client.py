"""Session client that maps LinkedIn URLs onto LinkUp API calls.

Supported resources:

- ``/in/<handle>``                           profile (single document)
- ``/company/<handle>``                      company (single document)
- ``/messaging/thread/<id>``                 conversation messages (list)
- ``/messaging``                             inbox conversations (list)
- ``/mynetwork/invite-connect/connections``  connections (list)

Messages and connections are paged by numeric page windows, the inbox by an
opaque server cursor.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import Any, Final
from urllib.parse import SplitResult, unquote, urlsplit

from .errors import LinkupInvalidUrl, LinkupUnknownResource
from .http import LinkupHttpClient
from .protocol import (
    DEFAULT_COUNTRY,
    PAGE_WINDOW_SIZE,
    InboxPage,
    build_company_body,
    build_connections_body,
    build_conversation_body,
    build_inbox_body,
    build_profile_body,
    is_count,
    parse_fetch_response,
    parse_inbox_data,
)

_LOGGER = logging.getLogger(__name__)

LINKEDIN_DOMAIN: Final = "linkedin.com"


class LinkupClient:
    """Fetch LinkedIn resources through the LinkUp API with one session token.

    The token is fixed for the lifetime of the client. When it expires the
    caller builds a new client (see :class:`linkup_fetcher.session.LinkupSession`).
    """

    def __init__(
        self,
        http: LinkupHttpClient,
        login_token: str,
        *,
        country: str = DEFAULT_COUNTRY,
    ) -> None:
        self._http = http
        self._login_token = login_token
        self._country = country

    def __repr__(self) -> str:
        return f"{type(self).__name__}(http={self._http!r}, country={self._country!r})"

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def fetch(self, url: str) -> Any:
        """Fetch the resource behind a LinkedIn URL.

        Returns:
            The profile or company document for ``/in/`` and ``/company/``
            URLs, otherwise a list of records.

        Raises:
            LinkupInvalidUrl: If the URL cannot be parsed.
            LinkupUnknownResource: If the host or path is not supported.
        """
        parts = _parse_url(url)

        host = parts.hostname
        if not host or not host.endswith(LINKEDIN_DOMAIN):
            raise LinkupUnknownResource(url)

        path = parts.path
        if path.startswith("/in/"):
            return await self.fetch_profile(url)
        if path.startswith("/company/"):
            return await self.fetch_company(url)
        if path.startswith("/messaging/thread/"):
            return await self.fetch_conversation(url)
        if path.startswith("/messaging"):
            return await self.fetch_inbox()
        if path.startswith("/mynetwork/invite-connect/connections"):
            return await self.fetch_connections()

        raise LinkupUnknownResource(url)

    async def fetch_profile(self, url: str) -> Any:
        """Fetch a member profile."""
        _LOGGER.debug("Fetching profile %s", url)
        status, body = await self._http.post(
            "/profile/info",
            build_profile_body(
                linkedin_url=url, login_token=self._login_token, country=self._country
            ),
        )
        return parse_fetch_response(status, body)

    async def fetch_company(self, url: str) -> Any:
        """Fetch a company page."""
        _LOGGER.debug("Fetching company %s", url)
        status, body = await self._http.post(
            "/companies/info",
            build_company_body(
                company_url=url, login_token=self._login_token, country=self._country
            ),
        )
        return parse_fetch_response(status, body)

    async def fetch_conversation(self, url: str) -> list[Any]:
        """Fetch every message of the conversation named in a thread URL."""
        segments = [unquote(s) for s in _parse_url(url).path.split("/") if s]
        # /messaging/thread/<id>
        if len(segments) < 3:
            raise LinkupUnknownResource(url)

        conversation_id = await self.find_conversation(segments[2])
        if conversation_id is None:
            raise LinkupUnknownResource(url)

        messages: list[Any] = []
        start_page = 1
        while True:
            _LOGGER.debug("Requesting conversation messages, page %d", start_page)
            status, body = await self._http.post(
                "/messages/conversation",
                build_conversation_body(
                    conversation_id=conversation_id,
                    login_token=self._login_token,
                    start_page=start_page,
                    country=self._country,
                ),
            )
            data = parse_fetch_response(status, body)

            page = _page_items(data, "messages")
            if not page:
                break
            messages.extend(page)

            pagination = data.get("pagination")
            per_page = (
                pagination.get("messages_per_page")
                if isinstance(pagination, dict)
                else None
            )
            if not is_count(per_page) or len(page) < per_page:
                break

            start_page += PAGE_WINDOW_SIZE

        _LOGGER.debug("Fetched %d messages", len(messages))
        return messages

    async def fetch_connections(self) -> list[Any]:
        """Fetch the full connection list of the logged-in member."""
        connections: list[Any] = []
        start_page = 1
        while True:
            _LOGGER.debug("Requesting connections, page %d", start_page)
            status, body = await self._http.post(
                "/network/connections",
                build_connections_body(
                    login_token=self._login_token,
                    start_page=start_page,
                    country=self._country,
                ),
            )
            data = parse_fetch_response(status, body)

            page = _page_items(data, "connections")
            if not page:
                break
            if data.get("total_results") == 0:
                break
            connections.extend(page)

            start_page += PAGE_WINDOW_SIZE

        _LOGGER.debug("Fetched %d connections", len(connections))
        return connections

    async def fetch_inbox(self) -> list[Any]:
        """Fetch every conversation in the inbox."""
        conversations: list[Any] = []
        async for page in self._iter_inbox():
            conversations.extend(page.conversations)
        _LOGGER.debug("Fetched %d conversations", len(conversations))
        return conversations

    async def find_conversation(self, fragment: str) -> str | None:
        """Return the first conversation id containing ``fragment``.

        Stops requesting inbox pages as soon as a match is found. Returns None
        when the inbox is exhausted without a match.
        """
        async with aclosing(self._iter_inbox()) as pages:
            async for page in pages:
                for conversation in page.conversations:
                    if not isinstance(conversation, dict):
                        continue
                    conversation_id = conversation.get("conversation_id")
                    if not isinstance(conversation_id, str):
                        continue
                    if fragment in conversation_id:
                        return conversation_id
        _LOGGER.debug("No conversation matches %r", fragment)
        return None

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    async def _iter_inbox(self) -> AsyncIterator[InboxPage]:
        """Walk inbox pages following the server cursor."""
        next_cursor: str | None = None
        while True:
            _LOGGER.debug(
                "Requesting inbox (%s)", "continued" if next_cursor else "first page"
            )
            status, body = await self._http.post(
                "/messages/inbox",
                build_inbox_body(
                    login_token=self._login_token,
                    next_cursor=next_cursor,
                    country=self._country,
                ),
            )
            page = parse_inbox_data(status, body, parse_fetch_response(status, body))
            yield page

            if page.next_cursor is None:
                return
            next_cursor = page.next_cursor


def _parse_url(url: str) -> SplitResult:
    try:
        parts = urlsplit(url)
    except ValueError as err:
        raise LinkupInvalidUrl(url) from err
    if not parts.scheme:
        raise LinkupInvalidUrl(url)
    return parts


def _page_items(data: Any, key: str) -> list[Any] | None:
    """Return the items of one page, or None if the page is malformed.

    A malformed page ends pagination quietly and keeps what was collected.
    """
    items = data.get(key) if isinstance(data, dict) else None
    if not isinstance(items, list):
        _LOGGER.debug("Page without a %r list, stopping", key)
        return None
    return items
