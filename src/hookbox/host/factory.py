"""Select host backends from configuration, once, at startup."""

import logging

from hookbox.config.models import HookboxConfig
from hookbox.host.base import HostRuntime, KeyValueStore, Notifier
from hookbox.host.notifiers import LogNotifier, NullNotifier, TelegramNotifier
from hookbox.host.store import JSONFileStore, MemoryStore

logger = logging.getLogger(__name__)


def create_store(config: HookboxConfig) -> KeyValueStore:
    if config.host.store == "memory":
        return MemoryStore()
    return JSONFileStore(config.host.store_path.expanduser())


def create_notifier(config: HookboxConfig) -> Notifier:
    if config.host.notifier == "none":
        return NullNotifier()
    if config.host.notifier == "telegram":
        telegram = config.telegram
        return TelegramNotifier(
            chat_ids=telegram.notify_chat_ids if telegram else [],
            bot_token=config.telegram_token,
        )
    return LogNotifier()


def create_host(config: HookboxConfig) -> HostRuntime:
    """Build the host runtime described by ``[host]``."""
    host = HostRuntime(create_store(config), create_notifier(config))
    logger.debug(
        f"Host runtime: store={config.host.store}, notifier={config.host.notifier}"
    )
    return host
