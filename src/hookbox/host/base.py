"""Host runtime capability.

Scripts in hookbox never reach for a concrete runtime. They receive a Host,
which bundles a persistent key/value store with a notification channel:

    host = HostRuntime(JSONFileStore(path), LogNotifier())
    mapping = host.read_mapping("sora_video_url_map")
    host.write_mapping("sora_video_url_map", mapping)
    await host.notify("Title", "Subtitle", "Body")

Reads never fail (missing or unreadable data reads as empty) and writes
report failure through their return value, so callers can degrade to
"do nothing" instead of handling exceptions.
"""

import json
import logging
from collections.abc import Mapping
from contextlib import AbstractContextManager
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised by a KeyValueStore when stored data cannot be read or written."""


class KeyValueStore(Protocol):
    """Raw persistent storage. Implementations raise on failure."""

    def load(self, key: str) -> Any | None: ...

    def save(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> bool: ...

    def lock(self, key: str) -> AbstractContextManager[None]: ...


class Notifier(Protocol):
    """User-visible notification channel."""

    async def send(self, title: str, subtitle: str, body: str) -> None: ...

    async def close(self) -> None: ...

class Host(Protocol):
    """Storage-and-notification capability the scripts depend on."""

    def read_mapping(self, key: str) -> dict[str, Any]: ...

    def write_mapping(self, key: str, value: Mapping[str, Any]) -> bool: ...

    def read_value(self, key: str) -> str | None: ...

    def write_value(self, key: str, value: str) -> bool: ...

    async def notify(self, title: str, subtitle: str = "", body: str = "") -> None: ...

    def lock(self, key: str) -> AbstractContextManager[None]: ...


class HostRuntime:
    """Host implementation composed of a store and a notifier."""

    def __init__(self, store: KeyValueStore, notifier: Notifier):
        self._store = store
        self._notifier = notifier

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    def read_mapping(self, key: str) -> dict[str, Any]:
        """Read a JSON object. Missing, unreadable or non-object data reads as {}."""
        try:
            value = self._store.load(key)
        except (StoreError, OSError, ValueError) as e:
            logger.warning(
                "Failed to read mapping, using empty default",
                extra={"store.key": key, "error.message": str(e)},
            )
            return {}

        if value is None:
            return {}
        # Some hosts persist JSON as a string record
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                logger.warning(
                    "Stored mapping is not valid JSON, using empty default",
                    extra={"store.key": key},
                )
                return {}
        if not isinstance(value, dict):
            logger.warning(
                "Stored value is not a mapping, using empty default",
                extra={"store.key": key, "store.type": type(value).__name__},
            )
            return {}
        return value

    def write_mapping(self, key: str, value: Mapping[str, Any]) -> bool:
        """Persist a JSON-serializable mapping. Returns False on failure."""
        try:
            self._store.save(key, dict(value))
        except (StoreError, OSError, TypeError, ValueError) as e:
            logger.error(
                "Failed to write mapping",
                extra={"store.key": key, "error.message": str(e)},
            )
            return False
        return True

    def read_value(self, key: str) -> str | None:
        try:
            value = self._store.load(key)
        except (StoreError, OSError, ValueError) as e:
            logger.warning(
                "Failed to read value",
                extra={"store.key": key, "error.message": str(e)},
            )
            return None
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    def write_value(self, key: str, value: str) -> bool:
        try:
            self._store.save(key, value)
        except (StoreError, OSError, TypeError, ValueError) as e:
            logger.error(
                "Failed to write value",
                extra={"store.key": key, "error.message": str(e)},
            )
            return False
        return True

    def delete(self, key: str) -> bool:
        try:
            return self._store.delete(key)
        except (StoreError, OSError, ValueError) as e:
            logger.error(
                "Failed to delete key",
                extra={"store.key": key, "error.message": str(e)},
            )
            return False

    async def notify(self, title: str, subtitle: str = "", body: str = "") -> None:
        try:
            await self._notifier.send(title, subtitle, body)
        except Exception:
            logger.exception(f"Notification failed: {title}")

    def lock(self, key: str) -> AbstractContextManager[None]:
        return self._store.lock(key)

    async def close(self) -> None:
        """Release the notifier's resources (the Telegram session, if any)."""
        await self._notifier.close()
