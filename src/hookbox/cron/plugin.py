"""Cron job plugin: turns the ``[cron]`` config section into scheduled jobs.

Four job categories are supported:

- maskmsg: inject a message as if a user had sent it
- admin: run an admin command
- adminpush: push a message to the bot admins
- userpush: push a message to a user or group

Jobs are only registered from the system startup path. A user-triggered
initialization just replies that changes apply after a restart, so jobs are
never registered twice.
"""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from typing import Any

from hookbox.cron.bot import AdminPush, BotHost, MaskedMessage, UserPush
from hookbox.cron.models import (
    AdminCommandRule,
    AdminPushRule,
    BaseRule,
    CronPlusConfig,
    MaskMessageRule,
    UserPushRule,
    split_platforms,
)
from hookbox.cron.scheduler import CronScheduler, is_valid_cron
from hookbox.cron.template import render_message

logger = logging.getLogger(__name__)

SYSTEM_SOURCE = "system"
# Commands injected by the plugin's own admin jobs
CRON_SOURCE = "cron"
TRIGGER_PATTERN = re.compile(r"^(初始化定时任务|init cron jobs)$")

NOT_CONFIGURED_MESSAGE = (
    "Cron plugin is not configured yet: add a [cron] section to config.toml"
)
DISABLED_MESSAGE = "Cron plugin is disabled ([cron.basic] enable = false), exiting"
RESTART_MESSAGE = (
    "Settings saved. Restart to apply them (avoids registering jobs twice)"
)

Reply = Callable[[str], Awaitable[Any] | Any]

_KIND_LABELS = {
    "maskmsg": "masked message",
    "admin": "admin command",
    "adminpush": "admin push",
    "userpush": "user push",
}


class CronJobPlugin:
    """Registers configured cron jobs with a CronScheduler."""

    def __init__(
        self,
        config: CronPlusConfig | None,
        bot: BotHost,
        scheduler: CronScheduler,
    ):
        self._config = config
        self._bot = bot
        self._scheduler = scheduler
        self._job_ids: list[str] = []

    @property
    def job_ids(self) -> list[str]:
        return list(self._job_ids)

    def attach(self) -> None:
        """Register jobs when the scheduler starts."""
        self._scheduler.on_startup(self.on_startup)

    async def on_startup(self) -> int:
        return await self.initialize(SYSTEM_SOURCE)

    async def handle_command(
        self, text: str, source: str, reply: Reply | None = None
    ) -> bool:
        """Handle the chat trigger command. Returns True if it matched."""
        if not TRIGGER_PATTERN.match(text.strip()):
            return False
        await self.initialize(source, reply)
        return True

    async def initialize(self, source: str, reply: Reply | None = None) -> int:
        """Register every enabled job.

        Args:
            source: Where the request came from; only "system" registers jobs.
            reply: Callback used to answer a user-triggered request.

        Returns:
            Number of jobs registered.
        """
        config = self._config
        if config is None:
            logger.warning(NOT_CONFIGURED_MESSAGE)
            return 0
        if not config.basic.enable:
            logger.info(DISABLED_MESSAGE)
            return 0
        if source != SYSTEM_SOURCE:
            logger.info(RESTART_MESSAGE)
            if reply is not None:
                result = reply(RESTART_MESSAGE)
                if asyncio.iscoroutine(result):
                    await result
            return 0

        for job_id in self._job_ids:
            self._scheduler.remove_job(job_id)
        self._job_ids.clear()

        for job in config.maskmsg:
            if job.enable:
                self._register("maskmsg", job.rule, self._masked_action(job.rule))
        for job in config.admin:
            if job.enable:
                self._register("admin", job.rule, self._admin_action(job.rule))
        for job in config.adminpush:
            if job.enable:
                self._register(
                    "adminpush", job.rule, self._admin_push_action(job.rule)
                )
        for job in config.userpush:
            if job.enable:
                self._register("userpush", job.rule, self._user_push_action(job.rule))

        return len(self._job_ids)

    def _register(
        self,
        kind: str,
        rule: BaseRule,
        action: Callable[[], Awaitable[None]],
    ) -> None:
        label = _KIND_LABELS[kind]
        name = rule.display_name
        if not is_valid_cron(rule.cron):
            logger.warning(
                f"CronJobPlus: failed to register {label} {{{name}}} "
                f"cron {{{rule.cron}}}"
            )
            return
        job = self._scheduler.add_job(name, rule.cron, action, kind=kind)
        self._job_ids.append(job.id)
        logger.info(f"CronJobPlus: registered {label} {{{name}}} cron {{{rule.cron}}}")

    def _render(self, template: str) -> str:
        return render_message(template, self._scheduler.now())

    def _masked_action(self, rule: MaskMessageRule) -> Callable[[], Awaitable[None]]:
        async def run() -> None:
            message = MaskedMessage(
                msg=self._render(rule.msg),
                user_id=rule.userid or "0",
                group_id=rule.groupid or "0",
                friend_id=rule.friendid or "0",
            )
            if not await self._bot.send_masked(message, rule.form):
                logger.warning(
                    f"CronJobPlus: masked message {{{rule.display_name}}} "
                    f"was not handled"
                )
                return
            logger.info(
                f"CronJobPlus: ran masked message {{{rule.display_name}}} "
                f"message {{{message.msg}}}"
            )

        return run

    def _admin_action(self, rule: AdminCommandRule) -> Callable[[], Awaitable[None]]:
        async def run() -> None:
            command = self._render(rule.msg)
            if not await self._bot.inline(command):
                logger.warning(
                    f"CronJobPlus: admin command {{{rule.display_name}}} "
                    f"was not handled"
                )
                return
            logger.info(
                f"CronJobPlus: ran admin command {{{rule.display_name}}} "
                f"command {{{command}}}"
            )

        return run

    def _admin_push_action(self, rule: AdminPushRule) -> Callable[[], Awaitable[None]]:
        platforms = split_platforms(rule.form)

        async def run() -> None:
            push = AdminPush(
                msg=self._render(rule.msg),
                platforms=list(platforms),
                type=rule.type or "text",
                path=rule.path or "",
            )
            await self._bot.push_admin(push)
            logger.info(
                f"CronJobPlus: ran admin push {{{rule.display_name}}} "
                f"message {{{push.msg}}}"
            )

        return run

    def _user_push_action(self, rule: UserPushRule) -> Callable[[], Awaitable[None]]:
        platforms = split_platforms(rule.form)

        async def run() -> None:
            push = UserPush(
                msg=self._render(rule.msg),
                platforms=list(platforms),
                user_id=rule.userid,
                group_id=rule.groupid,
                type=rule.type or "text",
                path=rule.path or "",
            )
            await self._bot.push(push)
            logger.info(
                f"CronJobPlus: ran user push {{{rule.display_name}}} "
                f"message {{{push.msg}}}"
            )

        return run
