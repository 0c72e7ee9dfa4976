"""Configuration loading from TOML files and environment variables."""

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import SecretStr

from hookbox.config.models import HookboxConfig
from hookbox.config.paths import get_config_path


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("config.toml"),  # Current directory
        get_config_path(),  # ~/.hookbox/config.toml (or HOOKBOX_HOME)
        Path("/etc/hookbox/config.toml"),  # System-wide
    ]


def _get_nested(config: dict[str, Any], *keys: str) -> dict[str, Any] | None:
    """Get nested dict by keys, returning None if any key is missing."""
    section = config
    for key in keys:
        if key not in section or section[key] is None:
            return None
        section = section[key]
    return section


def _set_secret_from_env(section: dict[str, Any], key: str, env_var: str) -> None:
    """Set a secret value from environment if not already set."""
    if section.get(key) is None:
        value = os.environ.get(env_var)
        if value:
            section[key] = SecretStr(value)


def _resolve_env_secrets(config: dict[str, Any]) -> dict[str, Any]:
    """Resolve secrets from environment variables where not set in config."""
    if os.environ.get("TELEGRAM_BOT_TOKEN") and _get_nested(config, "telegram") is None:
        config["telegram"] = {}

    simple_mappings = [
        ("telegram", "bot_token", "TELEGRAM_BOT_TOKEN"),
    ]
    for parent_key, secret_key, env_var in simple_mappings:
        if (section := _get_nested(config, parent_key)) is not None:
            _set_secret_from_env(section, secret_key, env_var)

    return config


def find_config_path(path: Path | None = None) -> Path | None:
    """Resolve the config file to load, or None if none exists.

    Raises:
        FileNotFoundError: If an explicit path was given and does not exist.
    """
    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return config_path

    for default_path in _get_default_config_paths():
        expanded = default_path.expanduser()
        if expanded.exists():
            return expanded
    return None


def load_config(path: Path | None = None) -> HookboxConfig:
    """Load configuration from TOML file.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        Validated HookboxConfig instance.

    Raises:
        FileNotFoundError: If no config file is found.
        ValueError: If config file is invalid.
    """
    config_path = find_config_path(path)
    if config_path is None:
        searched = ", ".join(str(p) for p in _get_default_config_paths())
        raise FileNotFoundError(f"No config file found. Searched: {searched}")

    with config_path.open("rb") as f:
        raw_config = tomllib.load(f)

    raw_config = _resolve_env_secrets(raw_config)

    return HookboxConfig.model_validate(raw_config)


def load_config_or_default(path: Path | None = None) -> HookboxConfig:
    """Load the config file if one exists, otherwise use defaults.

    An explicit path that does not exist is still an error.
    """
    if path is None and find_config_path() is None:
        return get_default_config()
    return load_config(path)


def get_default_config() -> HookboxConfig:
    """Get a default configuration (no file, environment secrets applied)."""
    return HookboxConfig.model_validate(_resolve_env_secrets({}))
