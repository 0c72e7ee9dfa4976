"""Bot host interface used by cron job actions.

A cron job never talks to a chat platform directly. It calls one of the four
BotHost operations and the host decides how to deliver.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from aiogram import Bot

logger = logging.getLogger(__name__)

TELEGRAM_PLATFORM = "telegram"


@dataclass
class MaskedMessage:
    """A message injected as if a user had typed it."""

    msg: str
    type: str = "text"
    user_id: str = "0"
    group_id: str = "0"
    friend_id: str = "0"


@dataclass
class AdminPush:
    """A push delivered to the bot admins."""

    msg: str
    platforms: list[str] = field(default_factory=list)  # empty = all platforms
    type: str = "text"
    path: str = ""


@dataclass
class UserPush:
    """A push delivered to a user or group."""

    msg: str
    platforms: list[str] = field(default_factory=list)
    user_id: str = ""
    group_id: str = ""
    type: str = "text"
    path: str = ""


# Receives the command text and, for masked messages, the message it came from.
# Returns True when it handled the command.
CommandHandler = Callable[[str, MaskedMessage | None], Awaitable[bool]]


class BotHost(Protocol):
    """Dispatch surface of the chat-bot framework.

    send_masked() and inline() return whether anything handled the input.
    """

    async def send_masked(self, message: MaskedMessage, platform: str) -> bool: ...

    async def inline(self, command: str) -> bool: ...

    async def push_admin(self, push: AdminPush) -> None: ...

    async def push(self, push: UserPush) -> None: ...


class LoggingBotHost:
    """BotHost that records every dispatch in the log.

    Useful for dry runs (``hookbox cron run --dry-run``) and tests.
    """

    def __init__(self) -> None:
        self.dispatched: list[tuple[str, Any]] = []

    async def send_masked(self, message: MaskedMessage, platform: str) -> bool:
        self.dispatched.append(("masked", (platform, message)))
        logger.info(f"[dry-run] masked message on '{platform}': {message.msg}")
        return True

    async def inline(self, command: str) -> bool:
        self.dispatched.append(("inline", command))
        logger.info(f"[dry-run] admin command: {command}")
        return True

    async def push_admin(self, push: AdminPush) -> None:
        self.dispatched.append(("push_admin", push))
        platforms = ",".join(push.platforms) or "all"
        logger.info(f"[dry-run] admin push ({platforms}, {push.type}): {push.msg}")

    async def push(self, push: UserPush) -> None:
        self.dispatched.append(("push", push))
        target = push.group_id or push.user_id or "?"
        logger.info(f"[dry-run] user push to {target} ({push.type}): {push.msg}")


def _targets_platform(platforms: list[str], platform: str) -> bool:
    return not platforms or platform in platforms


class TelegramBotHost:
    """BotHost backed by a Telegram bot (aiogram 3.x).

    Pushes are sent as Telegram messages. Admin commands and masked messages
    are handed to the registered command handlers, since they represent input
    to the bot rather than output from it.
    """

    def __init__(
        self,
        bot_token: str | None = None,
        admin_chat_ids: list[str] | None = None,
        bot: "Bot | None" = None,
    ):
        if bot is None:
            if not bot_token:
                raise ValueError("TelegramBotHost requires a bot token or a Bot")
            from aiogram import Bot

            bot = Bot(token=bot_token)
        self._bot = bot
        self._admin_chat_ids = list(admin_chat_ids or [])
        self._command_handlers: list[CommandHandler] = []

    @property
    def bot(self) -> "Bot":
        return self._bot

    def on_command(self, handler: CommandHandler) -> CommandHandler:
        """Decorator to register a handler for injected commands."""
        self._command_handlers.append(handler)
        return handler

    async def _dispatch_command(
        self, text: str, origin: MaskedMessage | None
    ) -> bool:
        handled = False
        for handler in self._command_handlers:
            if await handler(text, origin):
                handled = True
        if not handled:
            logger.warning(f"No command handler accepted, dropping: {text}")
        return handled

    async def send_masked(self, message: MaskedMessage, platform: str) -> bool:
        if platform and platform != TELEGRAM_PLATFORM:
            logger.warning(f"Masked message for unsupported platform '{platform}'")
            return False
        return await self._dispatch_command(message.msg, message)

    async def inline(self, command: str) -> bool:
        return await self._dispatch_command(command, None)

    async def push_admin(self, push: AdminPush) -> None:
        if not _targets_platform(push.platforms, TELEGRAM_PLATFORM):
            logger.debug(f"Admin push skipped, platforms={push.platforms}")
            return
        if not self._admin_chat_ids:
            logger.warning("Admin push dropped: no telegram admin_chat_ids configured")
            return
        for chat_id in self._admin_chat_ids:
            await self._send(chat_id, push.msg, push.type, push.path)

    async def push(self, push: UserPush) -> None:
        if not _targets_platform(push.platforms, TELEGRAM_PLATFORM):
            logger.debug(f"User push skipped, platforms={push.platforms}")
            return
        chat_id = push.group_id or push.user_id
        if not chat_id:
            logger.warning(f"User push dropped: no user or group id ({push.msg[:50]})")
            return
        await self._send(chat_id, push.msg, push.type, push.path)

    async def _send(self, chat_id: str, text: str, msg_type: str, path: str) -> None:
        if msg_type in ("image", "video") and path:
            media = _media_input(path)
            if msg_type == "image":
                await self._bot.send_photo(chat_id=chat_id, photo=media, caption=text)
            else:
                await self._bot.send_video(chat_id=chat_id, video=media, caption=text)
            return
        await self._bot.send_message(chat_id=chat_id, text=text)

    async def close(self) -> None:
        await self._bot.session.close()


def _media_input(path: str) -> Any:
    """URLs and file ids go through as-is, local files are uploaded."""
    if Path(path).expanduser().is_file():
        from aiogram.types import FSInputFile

        return FSInputFile(Path(path).expanduser())
    return path
