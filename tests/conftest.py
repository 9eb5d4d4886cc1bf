"""Pytest configuration and fixtures for linkup_fetcher tests."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from linkup_fetcher.http import LinkupHttpClient

API_KEY = "test-api-key"
LOGIN_TOKEN = "test-login-token"


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock aiohttp ClientSession."""
    import aiohttp

    return MagicMock(spec=aiohttp.ClientSession)


@pytest.fixture
def mock_http() -> MagicMock:
    """Create a mock LinkupHttpClient whose post() is awaited by callers."""
    http = MagicMock(spec=LinkupHttpClient)
    http.post = AsyncMock()
    return http


class MemoryCredentialStore:
    """Dict-backed credential store for tests."""

    def __init__(self, **entries: str) -> None:
        self.entries: dict[str, str] = dict(entries)
        self.writes: list[tuple[str, str]] = []

    def get(self, name: str) -> str | None:
        return self.entries.get(name)

    def set(self, name: str, value: str) -> None:
        self.entries[name] = value
        self.writes.append((name, value))


def create_mock_response(
    status: int = 200,
    text_data: str | None = None,
) -> AsyncMock:
    """Create a configured mock response.

    Args:
        status: HTTP status code
        text_data: Data to return from text() call

    Returns:
        Configured AsyncMock response
    """
    response = AsyncMock()
    response.status = status

    if text_data is not None:
        response.text.return_value = text_data

    response.__aenter__.return_value = response
    response.__aexit__.return_value = None

    return response


def success(status: int = 200, **fields: Any) -> tuple[int, str]:
    """Transport reply carrying a success envelope."""
    return status, json.dumps({"status": "success", **fields})


def data_reply(data: Any, status: int = 200) -> tuple[int, str]:
    """Transport reply carrying a success envelope with a data payload."""
    return success(status, data=data)


def error_reply(message: str, status: int = 400) -> tuple[int, str]:
    """Transport reply carrying an error envelope."""
    return status, json.dumps({"status": "error", "message": message})


def inbox_reply(
    conversations: list[Any], next_cursor: str | None = None
) -> tuple[int, str]:
    """Transport reply carrying one inbox page."""
    data: dict[str, Any] = {
        "conversations": conversations,
        "total_results": len(conversations),
    }
    if next_cursor is not None:
        data["next_cursor"] = next_cursor
    return data_reply(data)


def posted_bodies(http: MagicMock) -> list[dict[str, Any]]:
    """JSON bodies passed to every post() call, in order."""
    return [call.args[1] for call in http.post.call_args_list]


def posted_paths(http: MagicMock) -> list[str]:
    """Endpoint paths passed to every post() call, in order."""
    return [call.args[0] for call in http.post.call_args_list]
