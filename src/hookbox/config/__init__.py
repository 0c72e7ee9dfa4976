"""Configuration module."""

from hookbox.config.loader import (
    get_default_config,
    load_config,
    load_config_or_default,
)
from hookbox.config.models import (
    ConfigError,
    HookboxConfig,
    HostConfig,
    ServerConfig,
    TelegramConfig,
    VideoCacheConfig,
)
from hookbox.config.paths import (
    get_config_path,
    get_hookbox_home,
    get_logs_path,
    get_store_path,
)

__all__ = [
    "ConfigError",
    "HookboxConfig",
    "HostConfig",
    "ServerConfig",
    "TelegramConfig",
    "VideoCacheConfig",
    "get_config_path",
    "get_default_config",
    "get_hookbox_home",
    "get_logs_path",
    "get_store_path",
    "load_config",
    "load_config_or_default",
]
