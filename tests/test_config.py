"""Tests for apiplay.config -- data dir, config files, precedence, base URL."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from apiplay.config import (
    find_project_config,
    get_cache_dir,
    get_data_dir,
    load_config,
    resolve_base_url,
    resolve_config,
)
from apiplay.exceptions import ConfigError
from apiplay.models import AuthType, ParsedSpec, PlaygroundConfig, SnippetTarget, SpecServer


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    path.write_text(json.dumps(data))


# ---------------------------------------------------------------------------
# Data directory
# ---------------------------------------------------------------------------


class TestDataDir:
    def test_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "share"))
        monkeypatch.setattr("apiplay.config._is_xdg_platform", lambda: True)
        path = get_data_dir()
        assert path == tmp_path / "share" / "apiplay"
        assert path.is_dir()

    def test_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        monkeypatch.setattr("apiplay.config._is_xdg_platform", lambda: False)
        path = get_data_dir()
        assert path == tmp_path / ".apiplay"
        assert path.is_dir()


class TestCacheDir:
    def test_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
        monkeypatch.setattr("apiplay.config._is_xdg_platform", lambda: True)
        path = get_cache_dir()
        assert path == tmp_path / "cache" / "apiplay"
        assert path.is_dir()

    def test_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        monkeypatch.setattr("apiplay.config._is_xdg_platform", lambda: True)
        assert get_cache_dir() == tmp_path / ".cache" / "apiplay"

    def test_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        monkeypatch.setattr("apiplay.config._is_xdg_platform", lambda: False)
        assert get_cache_dir() == tmp_path / ".apiplay" / "cache"



# ---------------------------------------------------------------------------
# Config files
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_json(self, tmp_path: Path) -> None:
        path = tmp_path / "apiplay.json"
        _write_json(
            path,
            {
                "name": "Wallet Playground",
                "spec": "openapi.json",
                "auth": {"type": "apiKey", "header_name": "X-Token"},
                "features": {"snippet_languages": ["python"], "try_it": False},
                "theme": {"primary": "#000"},
            },
        )
        config = load_config(path)
        assert config.name == "Wallet Playground"
        assert config.spec == "openapi.json"
        assert config.auth.type == AuthType.API_KEY
        assert config.auth.header_name == "X-Token"
        assert config.features.snippet_languages == [SnippetTarget.PYTHON]
        assert config.features.try_it is False
        assert config.request.timeout == 30

    def test_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "apiplay.yaml"
        path.write_text("spec: https://example.com/openapi.yaml\nrequest:\n  timeout: 5\n")
        config = load_config(path)
        assert config.spec == "https://example.com/openapi.yaml"
        assert config.request.timeout == 5

    def test_empty_yaml_is_default(self, tmp_path: Path) -> None:
        path = tmp_path / "apiplay.yml"
        path.write_text("")
        assert load_config(path) == PlaygroundConfig()

    def test_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "apiplay.json"
        path.write_text("{oops")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(path)

    def test_invalid_schema(self, tmp_path: Path) -> None:
        path = tmp_path / "apiplay.json"
        _write_json(path, {"auth": {"type": "oauth2"}})
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(path)

    def test_find_project_config_prefers_json(self, tmp_path: Path) -> None:
        (tmp_path / "apiplay.yaml").write_text("name: y\n")
        (tmp_path / "apiplay.json").write_text("{}")
        assert find_project_config(tmp_path) == tmp_path / "apiplay.json"

    def test_find_project_config_none(self, tmp_path: Path) -> None:
        assert find_project_config(tmp_path) is None


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_config() == PlaygroundConfig()

    def test_project_file(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "apiplay.json", {"spec": "file.json"})
        assert resolve_config().spec == "file.json"

    def test_env_overrides_file(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(isolated_config / "apiplay.json", {"spec": "file.json", "base_url": "http://f"})
        monkeypatch.setenv("APIPLAY_SPEC", "env.json")
        monkeypatch.setenv("APIPLAY_BASE_URL", "http://env")
        config = resolve_config()
        assert config.spec == "env.json"
        assert config.base_url == "http://env"

    def test_cli_overrides_env(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("APIPLAY_SPEC", "env.json")
        config = resolve_config(cli_spec="cli.json", cli_base_url="http://cli")
        assert config.spec == "cli.json"
        assert config.base_url == "http://cli"

    def test_env_config_path(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        other = isolated_config / "other.yaml"
        other.write_text("name: Other\n")
        _write_json(isolated_config / "apiplay.json", {"name": "Project"})
        monkeypatch.setenv("APIPLAY_CONFIG", str(other))
        assert resolve_config().name == "Other"

    def test_cli_config_path(self, isolated_config: Path) -> None:
        other = isolated_config / "cli.json"
        _write_json(other, {"name": "Cli"})
        assert resolve_config(cli_config=str(other)).name == "Cli"

    def test_cli_config_missing(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            resolve_config(cli_config=str(isolated_config / "missing.json"))


# ---------------------------------------------------------------------------
# Base URL
# ---------------------------------------------------------------------------


class TestResolveBaseUrl:
    SPEC = ParsedSpec(servers=[SpecServer(url="https://api.example.com/v1/")])

    def test_configured_wins(self) -> None:
        config = PlaygroundConfig(base_url="http://localhost:8080/")
        assert resolve_base_url(config, self.SPEC) == "http://localhost:8080"

    def test_first_server(self) -> None:
        assert resolve_base_url(PlaygroundConfig(), self.SPEC) == "https://api.example.com/v1"

    def test_no_servers(self) -> None:
        assert resolve_base_url(PlaygroundConfig(), ParsedSpec()) == ""
