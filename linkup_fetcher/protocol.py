"""Protocol helpers for LinkUp API request bodies and response envelopes.

Every LinkUp response is a JSON object tagged by a ``status`` field:

    {"status": "success", ...endpoint specific fields...}
    {"status": "error", "message": "Invalid parameter"}

Decoding is strict. A body that is not JSON, is not tagged, or is tagged
``success`` without the fields the endpoint promises is a
:class:`LinkupDecodeError` carrying the raw status and body.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Final

from .errors import LinkupApiError, LinkupDecodeError, redact_body

_LOGGER = logging.getLogger(__name__)

API_BASE_URL: Final = "https://api.linkupapi.com/v1"
DEFAULT_COUNTRY: Final = "US"

# Pages requested per /messages/conversation and /network/connections call.
PAGE_WINDOW_SIZE: Final = 10

# The inbox endpoint answers larger values with an empty success payload.
INBOX_PAGE_SIZE: Final = 25

STATUS_SUCCESS: Final = "success"
STATUS_ERROR: Final = "error"


@dataclass(frozen=True)
class GotToken:
    """Login completed without a verification step."""

    login_token: str = field(repr=False)
    message: str = ""


@dataclass(frozen=True)
class NeedCode:
    """Login requires a verification code sent out of band."""

    message: str
    email: str = field(default="", repr=False)


LoginResult = GotToken | NeedCode


@dataclass(frozen=True)
class InboxPage:
    """One page of the inbox listing."""

    conversations: list[Any]
    total_results: int
    next_cursor: str | None = None


def is_count(value: Any) -> bool:
    """Return True for non-negative integers (bool excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _decode_failure(status: int, body: str, reason: str) -> LinkupDecodeError:
    _LOGGER.error(
        "Failed to parse response (%s): status=%s body=%r",
        reason,
        status,
        redact_body(body),
    )
    return LinkupDecodeError(status, body)


def decode_envelope(status: int, body: str) -> dict[str, Any]:
    """Decode a raw response body into a success envelope.

    Args:
        status: HTTP status code of the response.
        body: Raw response body text.

    Returns:
        The envelope object of a ``success`` response.

    Raises:
        LinkupApiError: The envelope is tagged ``error``.
        LinkupDecodeError: The body is not a tagged envelope.
    """
    try:
        envelope = json.loads(body)
    except ValueError as err:
        raise _decode_failure(status, body, "invalid JSON") from err

    if not isinstance(envelope, dict):
        raise _decode_failure(status, body, "envelope is not an object")

    tag = envelope.get("status")
    if tag == STATUS_ERROR:
        message = envelope.get("message")
        if not isinstance(message, str):
            raise _decode_failure(status, body, "error envelope without message")
        raise LinkupApiError(message)
    if tag != STATUS_SUCCESS:
        raise _decode_failure(status, body, f"unknown status tag {tag!r}")

    return envelope


def parse_login_response(status: int, body: str) -> LoginResult:
    """Decode an ``/auth/login`` response.

    The success payload is untagged: it carries either ``login_token`` (login
    finished) or ``email`` (a verification code was sent). Alternatives are
    tried in that order.
    """
    envelope = decode_envelope(status, body)
    message = envelope.get("message")
    if not isinstance(message, str):
        raise _decode_failure(status, body, "login response without message")

    login_token = envelope.get("login_token")
    if isinstance(login_token, str):
        return GotToken(login_token=login_token, message=message)

    email = envelope.get("email")
    if isinstance(email, str):
        return NeedCode(message=message, email=email)

    raise _decode_failure(status, body, "unrecognized login payload")


def parse_verify_response(status: int, body: str) -> str:
    """Decode an ``/auth/verify`` response into the session token."""
    envelope = decode_envelope(status, body)
    login_token = envelope.get("login_token")
    if not isinstance(login_token, str):
        raise _decode_failure(status, body, "verify response without login_token")
    message = envelope.get("message")
    if message is not None and not isinstance(message, str):
        raise _decode_failure(status, body, "verify message is not a string")
    return login_token


def parse_fetch_response(status: int, body: str) -> Any:
    """Decode a data response and return its ``data`` payload unchanged."""
    envelope = decode_envelope(status, body)
    if "data" not in envelope:
        raise _decode_failure(status, body, "response without data")
    return envelope["data"]


def parse_inbox_data(status: int, body: str, data: Any) -> InboxPage:
    """Interpret the ``data`` payload of a ``/messages/inbox`` response."""
    if not isinstance(data, dict):
        raise _decode_failure(status, body, "inbox data is not an object")

    conversations = data.get("conversations")
    total_results = data.get("total_results")
    next_cursor = data.get("next_cursor")

    if not isinstance(conversations, list):
        raise _decode_failure(status, body, "inbox data without conversations")
    if not is_count(total_results):
        raise _decode_failure(status, body, "inbox data without total_results")
    if next_cursor is not None and not isinstance(next_cursor, str):
        raise _decode_failure(status, body, "inbox next_cursor is not a string")

    return InboxPage(
        conversations=conversations,
        total_results=total_results,
        next_cursor=next_cursor,
    )


def build_login_body(
    *, email: str, password: str, country: str = DEFAULT_COUNTRY
) -> dict[str, Any]:
    """Construct the ``/auth/login`` request body."""
    return {"email": email, "password": password, "country": country}


def build_verify_body(
    *, email: str, code: str, country: str = DEFAULT_COUNTRY
) -> dict[str, Any]:
    """Construct the ``/auth/verify`` request body."""
    return {"email": email, "code": code, "country": country}


def build_profile_body(
    *, linkedin_url: str, login_token: str, country: str = DEFAULT_COUNTRY
) -> dict[str, Any]:
    """Construct the ``/profile/info`` request body."""
    return {
        "linkedin_url": linkedin_url,
        "country": country,
        "login_token": login_token,
    }


def build_company_body(
    *, company_url: str, login_token: str, country: str = DEFAULT_COUNTRY
) -> dict[str, Any]:
    """Construct the ``/companies/info`` request body."""
    return {
        "company_url": company_url,
        "country": country,
        "login_token": login_token,
    }


def build_page_window(start_page: int) -> dict[str, int]:
    """Return the closed page range starting at ``start_page``.

    Raises ValueError for page numbers below 1.
    """
    if start_page < 1:
        raise ValueError(f"start_page must be at least 1, got {start_page}")
    return {"start_page": start_page, "end_page": start_page + PAGE_WINDOW_SIZE - 1}


def build_conversation_body(
    *,
    conversation_id: str,
    login_token: str,
    start_page: int,
    country: str = DEFAULT_COUNTRY,
) -> dict[str, Any]:
    """Construct a ``/messages/conversation`` request body for one window."""
    return {
        "conversation_id": conversation_id,
        "login_token": login_token,
        "country": country,
        **build_page_window(start_page),
    }


def build_connections_body(
    *, login_token: str, start_page: int, country: str = DEFAULT_COUNTRY
) -> dict[str, Any]:
    """Construct a ``/network/connections`` request body for one window."""
    return {
        "login_token": login_token,
        "country": country,
        **build_page_window(start_page),
    }


def build_inbox_body(
    *,
    login_token: str,
    next_cursor: str | None = None,
    country: str = DEFAULT_COUNTRY,
) -> dict[str, Any]:
    """Construct a ``/messages/inbox`` request body.

    The cursor is omitted entirely on the first request.
    """
    body: dict[str, Any] = {
        "login_token": login_token,
        "country": country,
        "total_results": INBOX_PAGE_SIZE,
    }
    if next_cursor is not None:
        body["next_cursor"] = next_cursor
    return body
