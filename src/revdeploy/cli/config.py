"""Configuration utilities for the revdeploy CLI.

The configuration is a JSON file, by default ``revdeploy.json`` at the root
of the repository being deployed:

    {
      "scheme": "sftp",
      "host": "example.com",
      "username": "deploy",
      "password": "${DEPLOY_PASSWORD}",
      "path": "public_html",
      "exclude": ["docs/", "tests/"],
      "additional": ["config/secrets.php"]
    }

``${NAME}`` references are replaced with environment variables so secrets
can stay out of the file.
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any

CONFIG_FILE_NAME = "revdeploy.json"

_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


def get_config_file(repo_path: Path, config_path: Path | str | None = None) -> Path:
    """Get the path to the config file.

    Args:
        repo_path: Repository being deployed.
        config_path: Explicit path given on the command line, if any.

    Returns:
        Path to the configuration file.
    """
    if config_path:
        return Path(config_path).expanduser()
    return repo_path / CONFIG_FILE_NAME


def expand_env(value: Any) -> Any:
    """Replace ``${NAME}`` references in strings, recursively.

    Raises:
        ConfigError: If a referenced variable is not set.
    """
    if isinstance(value, str):

        def _lookup(match: re.Match[str]) -> str:
            name = match.group(1)
            if name not in os.environ:
                raise ConfigError(f"Environment variable not set: {name}")
            return os.environ[name]

        return _ENV_REF.sub(_lookup, value)
    if isinstance(value, list):
        return [expand_env(v) for v in value]
    if isinstance(value, dict):
        return {k: expand_env(v) for k, v in value.items()}
    return value


def load_config(config_file: Path) -> dict[str, Any]:
    """Load configuration from config file.

    Raises:
        ConfigError: If the file is missing, unreadable or not a JSON object.
    """
    if not config_file.exists():
        raise ConfigError(f"Configuration file not found: {config_file}")
    try:
        data = json.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read {config_file}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file} must contain a JSON object")
    for key in ("exclude", "additional"):
        if key in data and not isinstance(data[key], list):
            raise ConfigError(f"'{key}' must be a list in {config_file}")
    return dict(expand_env(data))
