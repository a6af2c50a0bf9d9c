"""Playground configuration loading and precedence resolution.

The parser and request builder never read configuration themselves; the
CLI resolves a :class:`~apiplay.models.PlaygroundConfig` once and passes
the relevant pieces (auth settings, request settings, base URL) into each
call.

* **Files** -- ``apiplay.json``, ``apiplay.yaml`` or ``apiplay.yml`` in the
  working directory, or an explicit path. See :func:`load_config`.
* **Precedence** -- :func:`resolve_config` merges CLI flags, environment
  variables and the config file.
* **Base URL** -- :func:`resolve_base_url` picks the configured URL or the
  spec's first server.
* **Directories** -- :func:`get_data_dir` for crash logs and
  :func:`get_cache_dir` for fetched specs, XDG compliant on Linux/BSD.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from apiplay.exceptions import ConfigError
from apiplay.models import ParsedSpec, PlaygroundConfig

_APP_NAME = "apiplay"
_PROJECT_CONFIG_FILENAMES = ("apiplay.json", "apiplay.yaml", "apiplay.yml")

ENV_CONFIG = "APIPLAY_CONFIG"
ENV_SPEC = "APIPLAY_SPEC"
ENV_BASE_URL = "APIPLAY_BASE_URL"


# --- XDG directories ---


def _is_xdg_platform() -> bool:
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/apiplay/`` (default ``~/.local/share/apiplay/``).
    On macOS/Windows: ``~/.apiplay/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the cache directory for fetched specs, creating it if necessary.

    On Linux/BSD: ``$XDG_CACHE_HOME/apiplay/`` (default ``~/.cache/apiplay/``).
    On macOS/Windows: ``~/.apiplay/cache/``. Safe to delete at any time.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Config files ---


def find_project_config(directory: Optional[Path] = None) -> Optional[Path]:
    """Return the first ``apiplay.{json,yaml,yml}`` in *directory* (default: cwd)."""
    directory = directory or Path.cwd()
    for filename in _PROJECT_CONFIG_FILENAMES:
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path) -> PlaygroundConfig:
    """Load and validate a playground config file.

    JSON is used for ``.json`` files and YAML for everything else.

    Raises:
        ConfigError: If the file is missing, cannot be decoded, or fails
            validation.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
        data: Any
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc

    if data is None:
        return PlaygroundConfig()
    try:
        return PlaygroundConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


# --- Precedence resolution ---


def resolve_config(
    cli_config: Optional[str] = None,
    cli_spec: Optional[str] = None,
    cli_base_url: Optional[str] = None,
) -> PlaygroundConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_config``, ``cli_spec``, ``cli_base_url``)
        2. Environment variables (``APIPLAY_CONFIG``, ``APIPLAY_SPEC``,
           ``APIPLAY_BASE_URL``)
        3. Project config file in the working directory
        4. Defaults

    Returns:
        A new :class:`~apiplay.models.PlaygroundConfig`.
    """
    config_path: Optional[Path] = None
    if cli_config is not None:
        config_path = Path(cli_config)
    elif os.environ.get(ENV_CONFIG):
        config_path = Path(os.environ[ENV_CONFIG])
    else:
        config_path = find_project_config()

    config = load_config(config_path) if config_path is not None else PlaygroundConfig()

    overrides: dict[str, Any] = {}
    spec = cli_spec if cli_spec is not None else os.environ.get(ENV_SPEC)
    if spec:
        overrides["spec"] = spec
    base_url = cli_base_url if cli_base_url is not None else os.environ.get(ENV_BASE_URL)
    if base_url:
        overrides["base_url"] = base_url

    return config.model_copy(update=overrides) if overrides else config


def resolve_base_url(config: PlaygroundConfig, spec: ParsedSpec) -> str:
    """Return the configured base URL, else the first server URL, else ``""``.

    A trailing slash is stripped so that path templates can be appended.
    """
    if config.base_url:
        return config.base_url.rstrip("/")
    if spec.servers:
        return spec.servers[0].url.rstrip("/")
    return ""
