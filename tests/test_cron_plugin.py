"""Tests for the cron job plugin."""

import logging
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from hookbox.config.models import HookboxConfig
from hookbox.cron.bot import (
    AdminPush,
    LoggingBotHost,
    MaskedMessage,
    TelegramBotHost,
    UserPush,
)
from hookbox.cron.models import CronPlusConfig
from hookbox.cron.plugin import (
    RESTART_MESSAGE,
    SYSTEM_SOURCE,
    CronJobPlugin,
)
from hookbox.cron.runtime import create_bot_host, create_cron_runtime
from hookbox.cron.scheduler import CronScheduler


def _config(**sections) -> CronPlusConfig:
    return CronPlusConfig.model_validate({"basic": {"enable": True}, **sections})


@pytest.fixture
def bot() -> LoggingBotHost:
    return LoggingBotHost()


@pytest.fixture
def scheduler() -> CronScheduler:
    return CronScheduler(timezone="UTC")


class TestInitialize:
    """Which requests register jobs."""

    async def test_not_configured(self, bot, scheduler):
        plugin = CronJobPlugin(None, bot, scheduler)
        assert await plugin.initialize(SYSTEM_SOURCE) == 0
        assert scheduler.list_jobs() == []

    async def test_disabled(self, bot, scheduler):
        config = CronPlusConfig.model_validate(
            {"basic": {"enable": False}, "admin": [{"rule": {"msg": "/status"}}]}
        )
        plugin = CronJobPlugin(config, bot, scheduler)
        assert await plugin.initialize(SYSTEM_SOURCE) == 0
        assert scheduler.list_jobs() == []

    async def test_system_registers_enabled_jobs(self, bot, scheduler):
        config = _config(
            maskmsg=[{"rule": {"name": "m", "msg": "/ping", "form": "telegram"}}],
            admin=[
                {"rule": {"name": "a", "msg": "/status"}},
                {"enable": False, "rule": {"name": "off", "msg": "/off"}},
            ],
            adminpush=[{"rule": {"name": "ap", "msg": "hi admins"}}],
            userpush=[{"rule": {"name": "up", "msg": "hi", "userid": "7"}}],
        )
        plugin = CronJobPlugin(config, bot, scheduler)

        assert await plugin.initialize(SYSTEM_SOURCE) == 4

        jobs = scheduler.list_jobs()
        assert [job.kind for job in jobs] == [
            "maskmsg",
            "admin",
            "adminpush",
            "userpush",
        ]
        assert [job.name for job in jobs] == ["m", "a", "ap", "up"]
        assert plugin.job_ids == [job.id for job in jobs]

    async def test_user_request_replies_and_registers_nothing(self, bot, scheduler):
        plugin = CronJobPlugin(
            _config(admin=[{"rule": {"msg": "/status"}}]), bot, scheduler
        )
        replies: list[str] = []

        assert await plugin.initialize("telegram", reply=replies.append) == 0

        assert replies == [RESTART_MESSAGE]
        assert scheduler.list_jobs() == []

    async def test_async_reply(self, bot, scheduler):
        plugin = CronJobPlugin(_config(), bot, scheduler)
        replies: list[str] = []

        async def reply(text: str) -> None:
            replies.append(text)

        await plugin.initialize("telegram", reply=reply)
        assert replies == [RESTART_MESSAGE]

    async def test_invalid_cron_is_skipped(self, bot, scheduler):
        config = _config(
            admin=[
                {"rule": {"name": "bad", "cron": "whenever", "msg": "/x"}},
                {"rule": {"name": "good", "msg": "/y"}},
            ]
        )
        plugin = CronJobPlugin(config, bot, scheduler)

        assert await plugin.initialize(SYSTEM_SOURCE) == 1
        assert [job.name for job in scheduler.list_jobs()] == ["good"]

    async def test_reinitialize_does_not_duplicate(self, bot, scheduler):
        plugin = CronJobPlugin(
            _config(admin=[{"rule": {"msg": "/status"}}]), bot, scheduler
        )
        await plugin.initialize(SYSTEM_SOURCE)
        await plugin.initialize(SYSTEM_SOURCE)
        assert len(scheduler.list_jobs()) == 1

    async def test_reinitialize_keeps_foreign_jobs(self, bot, scheduler):
        async def other():
            pass

        scheduler.add_job("other", "0 0 1 * * *", other)
        plugin = CronJobPlugin(
            _config(admin=[{"rule": {"msg": "/status"}}]), bot, scheduler
        )
        await plugin.initialize(SYSTEM_SOURCE)
        await plugin.initialize(SYSTEM_SOURCE)
        assert sorted(job.name for job in scheduler.list_jobs()) == [
            "/status",
            "other",
        ]


class TestHandleCommand:
    @pytest.mark.parametrize(
        "text", ["初始化定时任务", "init cron jobs", "  init cron jobs "]
    )
    async def test_trigger(self, bot, scheduler, text: str):
        plugin = CronJobPlugin(_config(), bot, scheduler)
        replies: list[str] = []
        assert await plugin.handle_command(text, "telegram", replies.append) is True
        assert replies == [RESTART_MESSAGE]

    async def test_other_text_ignored(self, bot, scheduler):
        plugin = CronJobPlugin(_config(), bot, scheduler)
        assert await plugin.handle_command("hello", "telegram") is False


class TestJobActions:
    """Jobs dispatch rendered messages through the bot host."""

    AT_EIGHT = datetime(2026, 10, 19, 8, 0, 0, tzinfo=UTC)

    async def _fire_all(self, scheduler: CronScheduler, monkeypatch) -> None:
        monkeypatch.setattr(scheduler, "now", lambda: self.AT_EIGHT)
        for job in scheduler.list_jobs():
            await job.action()

    async def test_masked_message(self, bot, scheduler, monkeypatch):
        config = _config(
            maskmsg=[
                {
                    "rule": {
                        "msg": "/weather @date@",
                        "form": "telegram",
                        "groupid": "-100",
                    }
                }
            ]
        )
        await CronJobPlugin(config, bot, scheduler).initialize(SYSTEM_SOURCE)
        await self._fire_all(scheduler, monkeypatch)

        assert bot.dispatched == [
            (
                "masked",
                (
                    "telegram",
                    MaskedMessage(
                        msg="/weather 2026-10-19",
                        user_id="0",
                        group_id="-100",
                        friend_id="0",
                    ),
                ),
            )
        ]

    async def test_admin_command(self, bot, scheduler, monkeypatch):
        config = _config(admin=[{"rule": {"msg": "/backup @time@"}}])
        await CronJobPlugin(config, bot, scheduler).initialize(SYSTEM_SOURCE)
        await self._fire_all(scheduler, monkeypatch)
        assert bot.dispatched == [("inline", "/backup 08:00:00")]

    async def test_admin_push(self, bot, scheduler, monkeypatch):
        config = _config(
            adminpush=[
                {
                    "rule": {
                        "msg": "Report\\n@date@",
                        "form": "telegram, qq",
                        "type": "image",
                        "path": "https://x/chart.png",
                    }
                }
            ]
        )
        await CronJobPlugin(config, bot, scheduler).initialize(SYSTEM_SOURCE)
        await self._fire_all(scheduler, monkeypatch)
        assert bot.dispatched == [
            (
                "push_admin",
                AdminPush(
                    msg="Report\n2026-10-19",
                    platforms=["telegram", "qq"],
                    type="image",
                    path="https://x/chart.png",
                ),
            )
        ]

    async def test_user_push_defaults_to_text(self, bot, scheduler, monkeypatch):
        config = _config(
            userpush=[{"rule": {"msg": "hi", "userid": "7", "form": "telegram"}}]
        )
        await CronJobPlugin(config, bot, scheduler).initialize(SYSTEM_SOURCE)
        await self._fire_all(scheduler, monkeypatch)
        assert bot.dispatched == [
            (
                "push",
                UserPush(msg="hi", platforms=["telegram"], user_id="7", type="text"),
            )
        ]

    async def test_template_rendered_on_every_run(self, bot, scheduler, monkeypatch):
        config = _config(admin=[{"rule": {"msg": "@date@"}}])
        await CronJobPlugin(config, bot, scheduler).initialize(SYSTEM_SOURCE)
        job = scheduler.list_jobs()[0]

        monkeypatch.setattr(scheduler, "now", lambda: self.AT_EIGHT)
        await job.action()
        next_day = datetime(2026, 10, 20, 8, 0, 0, tzinfo=UTC)
        monkeypatch.setattr(scheduler, "now", lambda: next_day)
        await job.action()

        assert bot.dispatched == [
            ("inline", "2026-10-19"),
            ("inline", "2026-10-20"),
        ]


class TestCronRuntime:
    async def test_jobs_register_on_scheduler_start(self):
        config = HookboxConfig(
            timezone="UTC",
            cron={"basic": {"enable": True}, "admin": [{"rule": {"msg": "/x"}}]},
        )
        runtime = create_cron_runtime(config, dry_run=True, poll_interval=0.01)
        assert isinstance(runtime.bot, LoggingBotHost)
        assert runtime.scheduler.list_jobs() == []

        await runtime.scheduler.start()
        try:
            assert len(runtime.scheduler.list_jobs()) == 1
        finally:
            await runtime.scheduler.stop()
            await runtime.close()

    def test_bot_host_without_token_logs(self):
        assert isinstance(
            create_bot_host(HookboxConfig(timezone="UTC")), LoggingBotHost
        )


class TestTelegramCommandRouting:
    """Injected commands reach the plugin's chat trigger."""

    @pytest.fixture
    def mock_bot(self) -> MagicMock:
        bot = MagicMock()
        bot.send_message = AsyncMock()
        bot.session.close = AsyncMock()
        return bot

    def _config(self, **cron) -> HookboxConfig:
        return HookboxConfig(
            timezone="UTC",
            telegram={"bot_token": "123456:ABCdef"},
            cron={"basic": {"enable": True}, **cron},
        )

    async def test_runtime_registers_command_handler(self, mock_bot, caplog):
        config = self._config(
            admin=[{"rule": {"name": "a", "msg": "初始化定时任务"}}],
            maskmsg=[
                {
                    "rule": {
                        "name": "m",
                        "msg": "init cron jobs",
                        "form": "telegram",
                        "groupid": "-100",
                    }
                }
            ],
        )
        runtime = create_cron_runtime(config, bot=TelegramBotHost(bot=mock_bot))
        assert await runtime.plugin.on_startup() == 2

        caplog.set_level(logging.INFO, logger="hookbox.cron")
        for job in runtime.scheduler.list_jobs():
            await job.action()

        # The masked trigger is answered in the chat it came from
        mock_bot.send_message.assert_awaited_once_with(
            chat_id="-100", text=RESTART_MESSAGE
        )
        assert "ran admin command {a}" in caplog.text
        assert "ran masked message {m}" in caplog.text
        assert "not handled" not in caplog.text
        # Nothing was registered twice
        assert len(runtime.scheduler.list_jobs()) == 2

    async def test_unhandled_command_is_not_reported_as_run(self, mock_bot, caplog):
        config = self._config(admin=[{"rule": {"name": "a", "msg": "/status"}}])
        runtime = create_cron_runtime(config, bot=TelegramBotHost(bot=mock_bot))
        await runtime.plugin.on_startup()

        caplog.set_level(logging.INFO, logger="hookbox.cron")
        await runtime.scheduler.list_jobs()[0].action()

        assert "admin command {a} was not handled" in caplog.text
        assert "ran admin command" not in caplog.text
        mock_bot.send_message.assert_not_awaited()
