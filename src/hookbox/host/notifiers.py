"""Notification channels for the host runtime."""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aiogram import Bot

logger = logging.getLogger(__name__)


def format_notification(title: str, subtitle: str, body: str) -> str:
    """Join the non-empty parts of a notification, one per line."""
    return "\n".join(part for part in (title, subtitle, body) if part)


class LogNotifier:
    """Writes notifications to the log."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []

    async def send(self, title: str, subtitle: str, body: str) -> None:
        self.sent.append((title, subtitle, body))
        logger.info(f"notification: {format_notification(title, subtitle, body)}")

    async def close(self) -> None:
        pass


class NullNotifier:
    """Drops every notification (muted host)."""

    async def send(self, title: str, subtitle: str, body: str) -> None:
        logger.debug(f"notification muted: {title}")

    async def close(self) -> None:
        pass


class TelegramNotifier:
    """Sends notifications to Telegram chats via aiogram."""

    def __init__(
        self,
        chat_ids: list[str],
        bot_token: str | None = None,
        bot: "Bot | None" = None,
    ):
        if bot is None:
            if not bot_token:
                raise ValueError("TelegramNotifier requires a bot token or a Bot")
            from aiogram import Bot

            bot = Bot(token=bot_token)
        self._bot = bot
        self._chat_ids = list(chat_ids)

    async def send(self, title: str, subtitle: str, body: str) -> None:
        if not self._chat_ids:
            logger.warning(f"No telegram notify_chat_ids configured, dropping: {title}")
            return
        text = format_notification(title, subtitle, body)
        for chat_id in self._chat_ids:
            await self._bot.send_message(chat_id=chat_id, text=text)

    async def close(self) -> None:
        await self._bot.session.close()
