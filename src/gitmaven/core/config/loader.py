"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < .env files < env vars

GITMAVEN_* values in .env files (user, then project .env and .env.local)
fill in for variables missing from the process environment. They are read,
not exported, so os.environ is never modified.
"""

import json
import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from dotenv import dotenv_values

from .models import RepoConfig

logger = logging.getLogger(__name__)

# Global cache to avoid reloading config multiple times per session
_config_cache: RepoConfig | None = None

# Keys accepted in config files, mapped to RepoConfig field names
KEY_ALIASES = {
    "gitUsername": "username",
    "gitPassword": "password",
    "localPath": "local_path",
    "repoDir": "local_path",
    "sshOptions": "ssh_options",
    "sshConfig": "ssh_options",
    "remoteName": "remote_name",
    "allowEmptyCommit": "allow_empty_commit",
    "repointRemote": "repoint_remote",
}

ENV_PREFIX = "GITMAVEN_"


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/gitmaven/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "gitmaven" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Working directory to search from (defaults to current directory)

    Returns:
        Path to .gitmaven.json in the project root
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".gitmaven.json"


def get_env_file_paths(project_dir: Path | None = None) -> list[Path]:
    """
    Get .env files in ascending precedence.

    Returns:
        User .env next to config.json, then project .env and .env.local
    """
    if project_dir is None:
        project_dir = Path.cwd()
    return [
        get_user_config_path().parent / ".env",
        project_dir / ".env",
        project_dir / ".env.local",
    ]


def read_env_files(paths: Iterable[Path]) -> dict[str, str]:
    """
    Collect GITMAVEN_* assignments from .env files.

    Later files override earlier ones. Other keys and valueless entries
    are ignored.
    """
    values: dict[str, str] = {}
    for path in paths:
        if not path.is_file():
            continue
        found = {
            key: value
            for key, value in dotenv_values(path).items()
            if key.startswith(ENV_PREFIX) and value is not None
        }
        if found:
            logger.debug("Loaded %s from %s", ", ".join(sorted(found)), path)
        values.update(found)
    return values


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    Nested dicts (such as ssh_options) are merged, not replaced.

    Example:
        >>> base = {"url": "a", "ssh_options": {"x": "1", "y": "2"}}
        >>> override = {"ssh_options": {"y": "3"}}
        >>> deep_merge(base, override)
        {'url': 'a', 'ssh_options': {'x': '1', 'y': '3'}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Rename camelCase keys to RepoConfig field names."""
    return {KEY_ALIASES.get(key, key): value for key, value in data.items()}


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open() as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            return None
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None


def _parse_bool(value: str) -> bool:
    return value.strip().lower() not in ("false", "0", "no", "off", "")


def apply_env_overrides(
    config_dict: dict[str, Any],
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Env vars have the highest precedence and override all config files.

    Supported env vars:
        GITMAVEN_URL - overrides url
        GITMAVEN_USERNAME - overrides username
        GITMAVEN_PASSWORD - overrides password
        GITMAVEN_LOCAL_PATH - overrides local_path
        GITMAVEN_BRANCH - overrides branch
        GITMAVEN_RELEASE - overrides release (false/0/no/off disable it)

    Args:
        config_dict: Configuration dictionary to override
        environ: Variables to read (defaults to os.environ)

    Returns:
        Configuration dictionary with env var overrides applied
    """
    if environ is None:
        environ = os.environ
    result = config_dict.copy()

    for field in ("url", "username", "password", "local_path", "branch"):
        if value := environ.get(f"{ENV_PREFIX}{field.upper()}"):
            result[field] = value

    if release_str := environ.get(f"{ENV_PREFIX}RELEASE"):
        result["release"] = _parse_bool(release_str)

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Field defaults live on RepoConfig; only values that differ from those
    belong here.
    """
    return {}


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> RepoConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (GITMAVEN_*), then GITMAVEN_* lines in .env files
        2. Project config (.gitmaven.json)
        3. User config (~/.config/gitmaven/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Project directory holding .gitmaven.json and .env (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        RepoConfig instance (the url is not validated here)

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    user_config_path = get_user_config_path()
    if user_config := load_json_file(user_config_path):
        logger.debug("Loaded user config from %s", user_config_path)
        merged = deep_merge(merged, normalize_keys(user_config))

    project_config_path = get_project_config_path(project_dir)
    if project_config := load_json_file(project_config_path):
        logger.debug("Loaded project config from %s", project_config_path)
        merged = deep_merge(merged, normalize_keys(project_config))

    environ = {**read_env_files(get_env_file_paths(project_dir)), **os.environ}
    merged = apply_env_overrides(merged, environ)

    config = RepoConfig(**merged)

    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
