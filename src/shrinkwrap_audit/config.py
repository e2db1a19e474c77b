"""Configuration loader for the advisory check.

Settings are layered, lowest priority first:

1. Built-in defaults (public API endpoint, ``advisories.json`` in the working
   directory). No dataset ships with the package; point ``advisories`` or
   ``SHRINKWRAP_AUDIT_ADVISORIES`` at a local copy to use another location.
2. A JSON rc file: an explicit path, the ``SHRINKWRAP_AUDIT_CONFIG``
   environment variable, or the first ``.shrinkwrapauditrc`` found in the
   current directory or the home directory.
3. ``SHRINKWRAP_AUDIT_*`` environment variables.

The rc file looks like::

    {
      "api": {"baseUrl": "https://api.example.com", "timeout": 10},
      "advisories": "/srv/advisories.json",
      "advisoryUrl": "https://example.com/advisories/"
    }

The resulting ``Settings`` is built once and passed to ``check`` explicitly.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .report import DEFAULT_ADVISORY_URL

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.requiresafe.com"
DEFAULT_TIMEOUT = 30.0
DEFAULT_ADVISORIES_PATH = Path("advisories.json")

RC_FILENAME = ".shrinkwrapauditrc"
CONFIG_PATH_ENV_VAR = "SHRINKWRAP_AUDIT_CONFIG"
API_BASE_URL_ENV_VAR = "SHRINKWRAP_AUDIT_API_BASE_URL"
TIMEOUT_ENV_VAR = "SHRINKWRAP_AUDIT_TIMEOUT"
ADVISORIES_ENV_VAR = "SHRINKWRAP_AUDIT_ADVISORIES"


@dataclass(slots=True, frozen=True)
class Settings:
    """Top-level settings container."""

    api_base_url: str = DEFAULT_API_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    advisories_path: Path = DEFAULT_ADVISORIES_PATH
    advisory_url_base: str = DEFAULT_ADVISORY_URL

    @property
    def check_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/check"


def _parse_timeout(value: Any, source: str) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"Invalid timeout in {source} (must be a positive number)")
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid timeout in {source} (must be a positive number)") from exc
    if timeout <= 0:
        raise ConfigError(f"Invalid timeout in {source} (must be a positive number)")
    return timeout


def _require_string(value: Any, field: str, source: str) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigError(f"Invalid '{field}' in {source} (must be a non-empty string)")
    return value


def _resolve_config_path(path: Path | str | None, environ: Mapping[str, str]) -> Path | None:
    """Resolve the rc file path.

    Priority:
    1. Explicit path argument
    2. SHRINKWRAP_AUDIT_CONFIG environment variable
    3. .shrinkwrapauditrc in the current directory, then the home directory
    """
    if path is not None:
        return Path(path)

    env_path = environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)

    for directory in (Path.cwd(), Path.home()):
        candidate = directory / RC_FILENAME
        if candidate.is_file():
            return candidate

    return None


def _read_rc(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in configuration file: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")

    return data


def _apply_rc(settings: Settings, data: dict[str, Any], source: str) -> Settings:
    api = data.get("api", {})
    if not isinstance(api, dict):
        raise ConfigError(f"'api' in {source} must be an object")

    if "baseUrl" in api:
        base_url = _require_string(api["baseUrl"], "api.baseUrl", source)
        settings = replace(settings, api_base_url=base_url)
    if "timeout" in api:
        settings = replace(settings, timeout=_parse_timeout(api["timeout"], source))
    if "advisories" in data:
        advisories = _require_string(data["advisories"], "advisories", source)
        settings = replace(settings, advisories_path=Path(advisories).expanduser())
    if "advisoryUrl" in data:
        settings = replace(
            settings,
            advisory_url_base=_require_string(data["advisoryUrl"], "advisoryUrl", source),
        )
    return settings


def _apply_env(settings: Settings, environ: Mapping[str, str]) -> Settings:
    base_url = environ.get(API_BASE_URL_ENV_VAR)
    if base_url:
        settings = replace(settings, api_base_url=base_url)

    timeout = environ.get(TIMEOUT_ENV_VAR)
    if timeout:
        settings = replace(settings, timeout=_parse_timeout(timeout, TIMEOUT_ENV_VAR))

    advisories = environ.get(ADVISORIES_ENV_VAR)
    if advisories:
        settings = replace(settings, advisories_path=Path(advisories).expanduser())

    return settings


def load_settings(
    path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build Settings from defaults, an optional rc file and the environment.

    Args:
        path: Optional path to the rc file. If not provided, uses the
            SHRINKWRAP_AUDIT_CONFIG env var or looks for .shrinkwrapauditrc.
        environ: Environment mapping; defaults to ``os.environ``.

    Raises:
        ConfigError: If the rc file cannot be read or contains invalid data.
    """
    environ = os.environ if environ is None else environ
    settings = Settings()

    config_path = _resolve_config_path(path, environ)
    if config_path is not None:
        logger.debug("Loading configuration from %s", config_path)
        settings = _apply_rc(settings, _read_rc(config_path), str(config_path))

    return _apply_env(settings, environ)
