"""Cron job plugin: scheduled messages, commands and pushes from config.

Public API:
- CronJobPlugin: Registers configured jobs with a scheduler
- CronScheduler: Polling loop that fires due jobs
- BotHost: Dispatch interface (LoggingBotHost, TelegramBotHost)

Types:
- CronPlusConfig: The [cron] config section
- ScheduledJob: A registered job
"""

from hookbox.cron.bot import (
    AdminPush,
    BotHost,
    LoggingBotHost,
    MaskedMessage,
    TelegramBotHost,
    UserPush,
)
from hookbox.cron.models import CronPlusConfig
from hookbox.cron.plugin import CronJobPlugin
from hookbox.cron.scheduler import CronScheduler, ScheduledJob, is_valid_cron
from hookbox.cron.template import render_message

__all__ = [
    "AdminPush",
    "BotHost",
    "CronJobPlugin",
    "CronPlusConfig",
    "CronScheduler",
    "LoggingBotHost",
    "MaskedMessage",
    "ScheduledJob",
    "TelegramBotHost",
    "UserPush",
    "is_valid_cron",
    "render_message",
]
