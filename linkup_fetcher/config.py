"""Module manifest and runtime configuration loading.

The manifest is a YAML file declaring the variables the fetcher needs:

    name: linkup
    label: LinkUp
    variables:
      linkup-api-key:
        description: LinkUp API key
      linkedin-email:
        description: LinkedIn account email
      linkup-country:
        default: US

A variable is resolved from the environment first (``linkup-api-key`` is read
from ``LINKUP_API_KEY``), then from the manifest default.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import LinkupConfigError, LinkupNotConfiguredError
from .http import DEFAULT_TIMEOUT
from .protocol import API_BASE_URL, DEFAULT_COUNTRY

_LOGGER = logging.getLogger(__name__)

MANIFEST_ENV = "LINKUP_MANIFEST"


def config_dir() -> Path:
    """Directory holding the manifest and stored credentials."""
    base = os.getenv("XDG_CONFIG_HOME") or "~/.config"
    return Path(base).expanduser() / "linkup-fetcher"


def env_name(variable: str) -> str:
    """Environment variable name for a manifest variable."""
    return variable.upper().replace("-", "_")


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file with error handling."""
    if not path.exists():
        raise LinkupConfigError(f"File not found: {path}")
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as err:
        raise LinkupConfigError(f"Failed to read manifest {path}") from err
    if not isinstance(data, dict):
        raise LinkupConfigError(f"Manifest {path} is not a mapping")
    return data


@dataclass(frozen=True)
class ModuleManifest:
    """Declared module variables and their defaults."""

    name: str = "linkup"
    label: str | None = None
    variables: dict[str, dict[str, Any]] = field(default_factory=lambda: {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModuleManifest:
        declared = data.get("variables") or {}
        if not isinstance(declared, dict):
            raise LinkupConfigError("Manifest 'variables' must be a mapping")

        variables: dict[str, dict[str, Any]] = {}
        for name, declaration in declared.items():
            variables[str(name)] = declaration if isinstance(declaration, dict) else {}
        return cls(
            name=data.get("name", "linkup"),
            label=data.get("label"),
            variables=variables,
        )

    @classmethod
    def read_manifest(cls, path: Path | None = None) -> ModuleManifest:
        """Load the manifest.

        Args:
            path: Explicit manifest path; must exist. When omitted,
                ``$LINKUP_MANIFEST`` or the default location is tried and a
                missing file yields an empty manifest.

        Raises:
            LinkupConfigError: If the manifest cannot be read.
        """
        if path is not None:
            return cls.from_dict(_load_yaml(path))

        env_path = os.getenv(MANIFEST_ENV)
        if env_path:
            return cls.from_dict(_load_yaml(Path(env_path).expanduser()))

        default_path = config_dir() / "manifest.yaml"
        if not default_path.exists():
            _LOGGER.debug("No manifest at %s, using environment only", default_path)
            return cls()
        return cls.from_dict(_load_yaml(default_path))

    def variable(self, name: str, default: str | None = None) -> str:
        """Resolve a variable value.

        Raises:
            LinkupNotConfiguredError: If no value is available.
        """
        value = os.getenv(env_name(name))
        if value:
            return value

        manifest_default = self.variables.get(name, {}).get("default")
        if manifest_default is not None:
            return str(manifest_default)

        if default is not None:
            return default
        raise LinkupNotConfiguredError(name)

    def optional(self, name: str) -> str | None:
        """Resolve a variable, returning None when it is not configured."""
        try:
            return self.variable(name)
        except LinkupNotConfiguredError:
            return None


@dataclass(frozen=True)
class LinkupConfig:
    """Settings needed to talk to the LinkUp API."""

    api_key: str = field(repr=False)
    email: str | None = field(default=None, repr=False)
    password: str | None = field(default=None, repr=False)
    country: str = DEFAULT_COUNTRY
    api_base_url: str = API_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    connect_timeout: float | None = None
    token_store_path: Path = field(
        default_factory=lambda: config_dir() / "credentials.json"
    )

    @classmethod
    def from_manifest(cls, manifest: ModuleManifest) -> LinkupConfig:
        """Build the configuration from manifest variables.

        Raises:
            LinkupNotConfiguredError: If the API key is missing.
            LinkupConfigError: If a numeric setting is malformed.
        """
        token_store = manifest.optional("linkup-token-store")
        return cls(
            api_key=manifest.variable("linkup-api-key"),
            email=manifest.optional("linkedin-email"),
            password=manifest.optional("linkedin-password"),
            country=manifest.variable("linkup-country", DEFAULT_COUNTRY),
            api_base_url=manifest.variable("linkup-api-url", API_BASE_URL),
            timeout=_parse_seconds(
                "linkup-timeout", manifest.variable("linkup-timeout", str(DEFAULT_TIMEOUT))
            ),
            connect_timeout=_parse_optional_seconds(
                "linkup-connect-timeout", manifest.optional("linkup-connect-timeout")
            ),
            token_store_path=(
                Path(token_store).expanduser()
                if token_store
                else config_dir() / "credentials.json"
            ),
        )


def _parse_seconds(name: str, value: str) -> float:
    try:
        seconds = float(value)
    except ValueError as err:
        raise LinkupConfigError(f"'{name}' must be a number, got {value!r}") from err
    if not math.isfinite(seconds):
        raise LinkupConfigError(f"'{name}' must be finite, got {value!r}")
    if seconds <= 0:
        raise LinkupConfigError(f"'{name}' must be positive, got {value!r}")
    return seconds


def _parse_optional_seconds(name: str, value: str | None) -> float | None:
    if value is None:
        return None
    return _parse_seconds(name, value)
