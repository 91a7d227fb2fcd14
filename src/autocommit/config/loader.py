"""
Configuration loader for autocommit.

The tool reads a JSON configuration file, by default ``config.json`` in
the ``~/.autocommit/`` directory of the user's home directory. It names
the remote to publish to and the working tree to operate on::

    {
        "origin_url": "git@example.com:team/generated.git",
        "repository_dir": "/srv/checkouts/generated",
        "request_timeout": 30
    }

Values passed as overrides (the CLI's ``--origin-url`` and
``--repo-dir``) win over the file. When every required key is supplied
that way, the default file does not need to exist.

If the configuration is missing, malformed, or missing required keys, a
:class:`ConfigError` is raised.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from autocommit.models import RepositoryConfig


logger = logging.getLogger(__name__)
# A null handler keeps library use silent; records still propagate to the
# handlers the CLI installs with basicConfig.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CONFIG_FILE_NAME = "config.json"
REQUIRED_KEYS = ("origin_url", "repository_dir")


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""

    pass


def _get_config_directory() -> Path:
    """Return the directory holding the default configuration file."""
    return Path.home() / ".autocommit"


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a JSON object")
    return data


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Load and validate the autocommit configuration.

    Args:
        config_path: Explicit configuration file. It must exist when given.
            Defaults to ``~/.autocommit/config.json``, which may be absent
            if ``overrides`` supply every required key.
        overrides: Values taking precedence over the file. ``None`` values
            are ignored.

    Returns:
        A dictionary with the validated configuration:
        - origin_url (str): URL of the ``origin`` remote
        - repository_dir (str): Path of the working tree
        - request_timeout (int|float, optional): Change set download timeout

    Raises:
        ConfigError: If the configuration is missing, malformed, or invalid.
    """
    provided = {key: value for key, value in (overrides or {}).items() if value is not None}
    explicit = config_path is not None
    path = config_path if explicit else _get_config_directory() / CONFIG_FILE_NAME

    data: Dict[str, Any] = {}
    if path.exists():
        data = _read_config_file(path)
        logger.debug("Loaded configuration from: %s", path)
    elif explicit or not all(key in provided for key in REQUIRED_KEYS):
        logger.error("Configuration file '%s' does not exist", path)
        raise ConfigError(
            f"Missing configuration file: {path}. "
            f"Create it or pass --origin-url and --repo-dir."
        )

    data.update(provided)

    missing = [key for key in REQUIRED_KEYS if key not in data]
    if missing:
        logger.error("Configuration missing required keys: %s", missing)
        raise ConfigError(f"Missing required configuration keys: {', '.join(missing)}")

    if not isinstance(data.get("origin_url"), str) or not data["origin_url"]:
        raise ConfigError("'origin_url' must be a non-empty string")
    if not isinstance(data.get("repository_dir"), str) or not data["repository_dir"]:
        raise ConfigError("'repository_dir' must be a non-empty string")
    timeout = data.get("request_timeout")
    if "request_timeout" in data and (
        isinstance(timeout, bool) or not isinstance(timeout, (int, float))
    ):
        raise ConfigError("'request_timeout' must be a number")

    logger.debug("Configuration data: %s", data)
    return data


def to_repository_config(data: Dict[str, Any]) -> RepositoryConfig:
    """Build a :class:`RepositoryConfig` from a loaded configuration."""
    return RepositoryConfig(
        origin_url=data["origin_url"],
        repository_dir=Path(data["repository_dir"]).expanduser(),
    )
