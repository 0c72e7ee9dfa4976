"""Host runtime capability: persistent storage plus notifications."""

from hookbox.host.base import Host, HostRuntime, KeyValueStore, Notifier, StoreError
from hookbox.host.factory import create_host
from hookbox.host.notifiers import LogNotifier, NullNotifier, TelegramNotifier
from hookbox.host.store import JSONFileStore, MemoryStore

__all__ = [
    "Host",
    "HostRuntime",
    "JSONFileStore",
    "KeyValueStore",
    "LogNotifier",
    "MemoryStore",
    "Notifier",
    "NullNotifier",
    "StoreError",
    "TelegramNotifier",
    "create_host",
]
