"""Tests for manifest loading and configuration resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from linkup_fetcher.config import (
    LinkupConfig,
    ModuleManifest,
    config_dir,
    env_name,
)
from linkup_fetcher.errors import LinkupConfigError, LinkupNotConfiguredError

VARIABLE_ENV = [
    "LINKUP_API_KEY",
    "LINKEDIN_EMAIL",
    "LINKEDIN_PASSWORD",
    "LINKUP_COUNTRY",
    "LINKUP_API_URL",
    "LINKUP_TIMEOUT",
    "LINKUP_CONNECT_TIMEOUT",
    "LINKUP_TOKEN_STORE",
    "LINKUP_MANIFEST",
]

MANIFEST_YAML = """\
name: linkup
label: LinkUp
variables:
  linkup-api-key:
    description: LinkUp API key
  linkedin-email:
    description: LinkedIn account email
  linkup-country:
    default: DE
  linkup-timeout:
    default: 30
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate tests from the caller's environment and config directory."""
    for name in VARIABLE_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


@pytest.fixture
def manifest_file(tmp_path: Path) -> Path:
    path = tmp_path / "manifest.yaml"
    path.write_text(MANIFEST_YAML, encoding="utf-8")
    return path


class TestModuleManifest:
    def test_env_name(self) -> None:
        assert env_name("linkup-api-key") == "LINKUP_API_KEY"

    def test_read_explicit_manifest(self, manifest_file: Path) -> None:
        manifest = ModuleManifest.read_manifest(manifest_file)

        assert manifest.name == "linkup"
        assert manifest.label == "LinkUp"
        assert set(manifest.variables) == {
            "linkup-api-key",
            "linkedin-email",
            "linkup-country",
            "linkup-timeout",
        }

    def test_explicit_manifest_must_exist(self, tmp_path: Path) -> None:
        with pytest.raises(LinkupConfigError, match="File not found"):
            ModuleManifest.read_manifest(tmp_path / "missing.yaml")

    def test_default_manifest_may_be_absent(self) -> None:
        manifest = ModuleManifest.read_manifest()
        assert manifest.variables == {}

    def test_default_manifest_location(self, manifest_file: Path) -> None:
        target = config_dir() / "manifest.yaml"
        target.parent.mkdir(parents=True)
        target.write_text(manifest_file.read_text(), encoding="utf-8")

        assert "linkup-country" in ModuleManifest.read_manifest().variables

    def test_manifest_from_env(
        self, manifest_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("LINKUP_MANIFEST", str(manifest_file))

        assert ModuleManifest.read_manifest().label == "LinkUp"

    @pytest.mark.parametrize(
        "content", ["- a\n- b\n", "key: [unclosed\n", "variables:\n  - a\n"]
    )
    def test_malformed_manifest(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "manifest.yaml"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(LinkupConfigError):
            ModuleManifest.read_manifest(path)

    def test_empty_manifest_file(self, tmp_path: Path) -> None:
        path = tmp_path / "manifest.yaml"
        path.write_text("", encoding="utf-8")

        assert ModuleManifest.read_manifest(path) == ModuleManifest()

    def test_environment_wins_over_manifest_default(
        self, manifest_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("LINKUP_COUNTRY", "FR")
        manifest = ModuleManifest.read_manifest(manifest_file)

        assert manifest.variable("linkup-country") == "FR"

    def test_manifest_default(self, manifest_file: Path) -> None:
        manifest = ModuleManifest.read_manifest(manifest_file)

        assert manifest.variable("linkup-country") == "DE"
        assert manifest.variable("linkup-timeout") == "30"

    def test_caller_default(self) -> None:
        assert ModuleManifest().variable("linkup-country", "US") == "US"

    def test_missing_variable_not_configured(self, manifest_file: Path) -> None:
        manifest = ModuleManifest.read_manifest(manifest_file)

        with pytest.raises(LinkupNotConfiguredError) as exc_info:
            manifest.variable("linkup-api-key")

        assert exc_info.value.variable == "linkup-api-key"
        assert manifest.optional("linkup-api-key") is None


class TestLinkupConfig:
    def test_from_manifest(
        self, manifest_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("LINKUP_API_KEY", "api-key")
        monkeypatch.setenv("LINKEDIN_EMAIL", "user@example.com")
        monkeypatch.setenv("LINKEDIN_PASSWORD", "hunter2")

        config = LinkupConfig.from_manifest(ModuleManifest.read_manifest(manifest_file))

        assert config.api_key == "api-key"
        assert config.email == "user@example.com"
        assert config.password == "hunter2"
        assert config.country == "DE"
        assert config.timeout == 30.0
        assert config.connect_timeout is None
        assert config.api_base_url == "https://api.linkupapi.com/v1"
        assert config.token_store_path == config_dir() / "credentials.json"

    def test_login_credentials_optional(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINKUP_API_KEY", "api-key")

        config = LinkupConfig.from_manifest(ModuleManifest())

        assert config.email is None
        assert config.password is None
        assert config.country == "US"
        assert config.timeout == 15.0

    def test_api_key_required(self) -> None:
        with pytest.raises(LinkupNotConfiguredError) as exc_info:
            LinkupConfig.from_manifest(ModuleManifest())

        assert exc_info.value.variable == "linkup-api-key"

    @pytest.mark.parametrize("value", ["soon", "0", "-5", "nan", "inf", "-inf"])
    def test_invalid_timeout(
        self, monkeypatch: pytest.MonkeyPatch, value: str
    ) -> None:
        monkeypatch.setenv("LINKUP_API_KEY", "api-key")
        monkeypatch.setenv("LINKUP_TIMEOUT", value)

        with pytest.raises(LinkupConfigError, match="linkup-timeout"):
            LinkupConfig.from_manifest(ModuleManifest())

    def test_token_store_override(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("LINKUP_API_KEY", "api-key")
        monkeypatch.setenv("LINKUP_TOKEN_STORE", str(tmp_path / "tokens.json"))
        monkeypatch.setenv("LINKUP_CONNECT_TIMEOUT", "2.5")

        config = LinkupConfig.from_manifest(ModuleManifest())

        assert config.token_store_path == tmp_path / "tokens.json"
        assert config.connect_timeout == 2.5

    def test_repr_hides_secrets(self) -> None:
        config = LinkupConfig(api_key="api-secret", email="e@x", password="pw-secret")

        assert "api-secret" not in repr(config)
        assert "pw-secret" not in repr(config)
