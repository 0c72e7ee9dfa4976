"""Centralized path management for hookbox.

All state (config, key/value store, logs) lives under a single base directory.
The base directory can be overridden with the HOOKBOX_HOME environment variable.

Default locations:
- Linux/macOS: ~/.hookbox
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "HOOKBOX_HOME"


def get_system_timezone() -> str:
    """Detect system timezone, falling back to UTC.

    Resolution order:
    1. TZ environment variable (if set)
    2. /etc/timezone file (Debian/Ubuntu)
    3. /etc/localtime symlink target (most Linux distros)
    4. Fallback to UTC

    Returns:
        IANA timezone name (e.g., "Asia/Shanghai", "Europe/London", "UTC").
    """
    if tz := os.environ.get("TZ"):
        return tz

    try:
        tz = Path("/etc/timezone").read_text().strip()
        if tz:
            return tz
    except (FileNotFoundError, PermissionError):
        pass

    try:
        link = Path("/etc/localtime").resolve()
        parts = str(link).split("zoneinfo/")
        if len(parts) > 1:
            return parts[1]
    except (FileNotFoundError, PermissionError):
        pass

    return "UTC"


@lru_cache(maxsize=1)
def get_hookbox_home() -> Path:
    """Get the base directory for all hookbox data.

    Resolution order:
    1. HOOKBOX_HOME environment variable (if set)
    2. Platform default (~/.hookbox)
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()

    return Path.home() / ".hookbox"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_hookbox_home() / "config.toml"


def get_data_path() -> Path:
    """Get the data directory path (persistent key/value store)."""
    return get_hookbox_home() / "data"


def get_store_path() -> Path:
    """Get the default JSON key/value store file."""
    return get_data_path() / "store.json"


def get_logs_path() -> Path:
    """Get the default logs directory path."""
    return get_hookbox_home() / "logs"


def get_all_paths() -> dict[str, Path]:
    """Get all standard paths for debugging/display."""
    return {
        "home": get_hookbox_home(),
        "config": get_config_path(),
        "data": get_data_path(),
        "store": get_store_path(),
        "logs": get_logs_path(),
    }
