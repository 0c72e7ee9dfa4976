"""Wire the cron plugin, its scheduler and a bot host from configuration."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from hookbox.cron.bot import (
    TELEGRAM_PLATFORM,
    BotHost,
    LoggingBotHost,
    MaskedMessage,
    TelegramBotHost,
    UserPush,
)
from hookbox.cron.plugin import CRON_SOURCE, CronJobPlugin
from hookbox.cron.scheduler import CronScheduler

if TYPE_CHECKING:
    from hookbox.config import HookboxConfig

logger = logging.getLogger(__name__)


@dataclass
class CronRuntime:
    """Everything needed to run configured cron jobs."""

    scheduler: CronScheduler
    plugin: CronJobPlugin
    bot: BotHost

    async def close(self) -> None:
        if isinstance(self.bot, TelegramBotHost):
            await self.bot.close()


def create_bot_host(config: "HookboxConfig", dry_run: bool = False) -> BotHost:
    """Telegram when a bot token is configured, otherwise a logging host."""
    if dry_run:
        return LoggingBotHost()
    token = config.telegram_token
    if not token:
        logger.warning(
            "No telegram bot token configured, cron jobs will only be logged"
        )
        return LoggingBotHost()
    admin_chat_ids = config.telegram.admin_chat_ids if config.telegram else []
    return TelegramBotHost(bot_token=token, admin_chat_ids=admin_chat_ids)


def _reply_target(origin: MaskedMessage) -> tuple[str, str]:
    """User and group id to answer a masked message on ("0" means none)."""
    user_id = "" if origin.user_id == "0" else origin.user_id
    group_id = "" if origin.group_id == "0" else origin.group_id
    return user_id, group_id


def wire_commands(plugin: CronJobPlugin, bot: TelegramBotHost) -> None:
    """Route commands injected into the bot to the plugin's chat trigger.

    Masked messages count as user input on telegram and get their answer in
    the originating chat. Inline commands come from the plugin's admin jobs.
    """

    @bot.on_command
    async def route_command(text: str, origin: MaskedMessage | None) -> bool:
        if origin is None:
            return await plugin.handle_command(text, CRON_SOURCE)

        user_id, group_id = _reply_target(origin)

        async def reply(message: str) -> None:
            if not (user_id or group_id):
                return
            await bot.push(
                UserPush(
                    msg=message,
                    platforms=[TELEGRAM_PLATFORM],
                    user_id=user_id,
                    group_id=group_id,
                )
            )

        return await plugin.handle_command(text, TELEGRAM_PLATFORM, reply)


def create_cron_runtime(
    config: "HookboxConfig",
    *,
    bot: BotHost | None = None,
    dry_run: bool = False,
    poll_interval: float = 1.0,
) -> CronRuntime:
    """Build the scheduler and plugin; jobs register when the scheduler starts."""
    scheduler = CronScheduler(timezone=config.timezone, poll_interval=poll_interval)
    bot_host = bot or create_bot_host(config, dry_run=dry_run)
    plugin = CronJobPlugin(config.cron, bot_host, scheduler)
    plugin.attach()
    if isinstance(bot_host, TelegramBotHost):
        wire_commands(plugin, bot_host)
    return CronRuntime(scheduler=scheduler, plugin=plugin, bot=bot_host)
