"""Persistent storage for secret credentials such as the session token."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from .errors import LinkupCredentialStoreError

_LOGGER = logging.getLogger(__name__)

DEFAULT_SERVICE = "linkup-fetcher"


class CredentialStore(Protocol):
    """Get/set secret strings by name."""

    def get(self, name: str) -> str | None:
        """Return the stored secret, or None if there is no entry."""
        ...

    def set(self, name: str, value: str) -> None:
        """Store a secret, replacing any previous value."""
        ...


class FileCredentialStore:
    """Credential store backed by a JSON file readable only by its owner.

    Layout: ``{"<service>": {"<name>": "<secret>"}}``.
    """

    def __init__(self, path: Path, *, service: str = DEFAULT_SERVICE) -> None:
        self._path = path
        self._service = service

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={str(self._path)!r}, service={self._service!r})"

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as err:
            raise LinkupCredentialStoreError(
                f"Failed to read credential store {self._path}"
            ) from err
        if not isinstance(data, dict):
            raise LinkupCredentialStoreError(
                f"Credential store {self._path} is not a JSON object"
            )
        return data

    def get(self, name: str) -> str | None:
        entries = self._load().get(self._service)
        if not isinstance(entries, dict):
            return None
        value = entries.get(name)
        return value if isinstance(value, str) else None

    def set(self, name: str, value: str) -> None:
        data = self._load()
        entries = data.get(self._service)
        if not isinstance(entries, dict):
            entries = {}
            data[self._service] = entries
        entries[name] = value

        _LOGGER.debug("Persisting credential %r to %s", name, self._path)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            # mkstemp creates the file with mode 0600
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f)
                os.replace(tmp_name, self._path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as err:
            raise LinkupCredentialStoreError(
                f"Failed to write credential store {self._path}"
            ) from err
