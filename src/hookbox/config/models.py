"""Configuration models using Pydantic."""

import logging
import re
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator

from hookbox.config.paths import get_store_path, get_system_timezone
from hookbox.cron.models import CronPlusConfig

logger = logging.getLogger(__name__)


class HostConfig(BaseModel):
    """Selects the host capability backends once at startup.

    store: "file" keeps every key in one JSON document on disk,
    "memory" keeps state for the lifetime of the process only.
    notifier: where notify() calls end up.
    """

    store: Literal["file", "memory"] = "file"
    store_path: Path = Field(default_factory=get_store_path)
    notifier: Literal["log", "telegram", "none"] = "log"


class VideoCacheConfig(BaseModel):
    """Configuration for the video URL cache and rewrite handler."""

    max_entries: int = Field(default=20, ge=1)
    map_key: str = "sora_video_url_map"
    daily_key: str = "sora_daily_check_date"
    # Substring that marks a request URL as the resolved "master" URL
    master_marker: str = "00000/src.mp4"
    path_pattern: str = r"/videos/([a-zA-Z0-9]+)/"
    query_param: str = "id"
    notify_on_cache: bool = True
    daily_notification: bool = True

    @field_validator("path_pattern")
    @classmethod
    def _validate_path_pattern(cls, value: str) -> str:
        try:
            compiled = re.compile(value)
        except re.error as e:
            raise ValueError(f"Invalid path_pattern: {e}") from e
        if compiled.groups < 1:
            raise ValueError("path_pattern must contain a capture group")
        return value


class TelegramConfig(BaseModel):
    """Configuration for Telegram delivery (notifications and pushes)."""

    bot_token: SecretStr | None = None
    notify_chat_ids: list[str] = []
    admin_chat_ids: list[str] = []


class ServerConfig(BaseModel):
    """Configuration for HTTP server."""

    host: str = "127.0.0.1"
    port: int = 8080


class ConfigError(Exception):
    """Configuration error."""

    pass


class HookboxConfig(BaseModel):
    """Root configuration model."""

    timezone: str = Field(default_factory=get_system_timezone)
    host: HostConfig = Field(default_factory=HostConfig)
    video_cache: VideoCacheConfig = Field(default_factory=VideoCacheConfig)
    # None means the cron plugin has never been configured
    cron: CronPlusConfig | None = None
    telegram: TelegramConfig | None = None
    server: ServerConfig = Field(default_factory=ServerConfig)

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone '{value}'") from e
        return value

    @model_validator(mode="after")
    def _validate_telegram_notifier(self) -> "HookboxConfig":
        """The telegram notifier needs a bot token."""
        if self.host.notifier == "telegram" and not self.telegram_token:
            raise ValueError(
                "host.notifier = 'telegram' requires [telegram] bot_token "
                "or TELEGRAM_BOT_TOKEN"
            )
        return self

    @property
    def telegram_token(self) -> str | None:
        if self.telegram is None or self.telegram.bot_token is None:
            return None
        return self.telegram.bot_token.get_secret_value() or None

    def require_cron(self) -> CronPlusConfig:
        """Get the cron plugin config.

        Raises:
            ConfigError: If the [cron] section is missing.
        """
        if self.cron is None:
            raise ConfigError("No [cron] section configured")
        return self.cron
