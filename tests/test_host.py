"""Tests for the host runtime: stores, notifiers and backend selection."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from hookbox.config.models import HookboxConfig
from hookbox.host import (
    HostRuntime,
    JSONFileStore,
    LogNotifier,
    MemoryStore,
    NullNotifier,
    StoreError,
    TelegramNotifier,
    create_host,
)
from hookbox.host.notifiers import format_notification


class TestJSONFileStore:
    """Tests for the file-backed store."""

    def test_load_missing_file(self, tmp_path: Path):
        store = JSONFileStore(tmp_path / "store.json")
        assert store.load("anything") is None

    def test_save_and_load(self, tmp_path: Path):
        store = JSONFileStore(tmp_path / "data" / "store.json")
        store.save("map", {"abc": "https://x/abc"})
        store.save("date", "2026-10-19")

        assert store.load("map") == {"abc": "https://x/abc"}
        assert store.load("date") == "2026-10-19"
        assert sorted(store.keys()) == ["date", "map"]

    def test_file_is_single_json_document(self, tmp_path: Path):
        path = tmp_path / "store.json"
        store = JSONFileStore(path)
        store.save("map", {"b": "2", "a": "1"})

        data = json.loads(path.read_text())
        assert data == {"map": {"b": "2", "a": "1"}}
        # Insertion order survives the round trip
        assert list(data["map"]) == ["b", "a"]

    def test_no_temp_file_left_behind(self, tmp_path: Path):
        store = JSONFileStore(tmp_path / "store.json")
        store.save("k", "v")
        assert not (tmp_path / "store.json.tmp").exists()

    def test_corrupt_file_raises_on_load(self, tmp_path: Path):
        path = tmp_path / "store.json"
        path.write_text("{not json")
        with pytest.raises(StoreError):
            JSONFileStore(path).load("k")

    def test_save_replaces_corrupt_file(self, tmp_path: Path):
        path = tmp_path / "store.json"
        path.write_text("{not json")
        store = JSONFileStore(path)
        store.save("k", "v")
        assert store.load("k") == "v"

    def test_unserializable_value_keeps_old_document(self, tmp_path: Path):
        store = JSONFileStore(tmp_path / "store.json")
        store.save("k", "v")
        with pytest.raises(TypeError):
            store.save("bad", {"x": object()})
        assert store.load("k") == "v"
        assert store.load("bad") is None

    def test_delete(self, tmp_path: Path):
        store = JSONFileStore(tmp_path / "store.json")
        store.save("k", "v")
        assert store.delete("k") is True
        assert store.delete("k") is False
        assert store.load("k") is None

    def test_lock_is_reentrant(self, tmp_path: Path):
        store = JSONFileStore(tmp_path / "store.json")
        with store.lock("k"):
            with store.lock("k"):
                store.save("k", "v")
        assert store.load("k") == "v"


class TestMemoryStore:
    """Tests for the in-process store."""

    def test_values_are_copied(self):
        store = MemoryStore()
        value = {"a": "1"}
        store.save("k", value)
        value["b"] = "2"

        loaded = store.load("k")
        assert loaded == {"a": "1"}
        loaded["c"] = "3"
        assert store.load("k") == {"a": "1"}

    def test_rejects_unserializable(self):
        with pytest.raises(TypeError):
            MemoryStore().save("k", {1, 2})

    def test_delete(self):
        store = MemoryStore({"k": "v"})
        assert store.delete("k") is True
        assert store.delete("k") is False


class TestHostRuntime:
    """Tests for the never-failing read/write surface."""

    def test_read_mapping_missing(self, host: HostRuntime):
        assert host.read_mapping("missing") == {}

    def test_read_mapping_from_json_string(self):
        host = HostRuntime(MemoryStore({"k": '{"a": "1"}'}), LogNotifier())
        assert host.read_mapping("k") == {"a": "1"}

    def test_read_mapping_invalid_json_string(self):
        host = HostRuntime(MemoryStore({"k": "{oops"}), LogNotifier())
        assert host.read_mapping("k") == {}

    def test_read_mapping_non_object(self):
        host = HostRuntime(MemoryStore({"k": ["a", "b"]}), LogNotifier())
        assert host.read_mapping("k") == {}

    def test_read_mapping_corrupt_file(self, tmp_path: Path):
        path = tmp_path / "store.json"
        path.write_text("garbage")
        host = HostRuntime(JSONFileStore(path), LogNotifier())
        assert host.read_mapping("k") == {}
        assert host.read_value("k") is None

    def test_write_mapping(self, host: HostRuntime):
        assert host.write_mapping("k", {"a": "1"}) is True
        assert host.read_mapping("k") == {"a": "1"}

    def test_write_failure_returns_false(self, failing_host: HostRuntime):
        assert failing_host.write_mapping("k", {"a": "1"}) is False
        assert failing_host.write_value("k", "v") is False

    def test_read_value_stringifies(self):
        host = HostRuntime(MemoryStore({"n": 5}), LogNotifier())
        assert host.read_value("n") == "5"

    def test_delete(self, host: HostRuntime):
        host.write_value("k", "v")
        assert host.delete("k") is True
        assert host.read_value("k") is None

    async def test_notify(self, host: HostRuntime, notifier: LogNotifier):
        await host.notify("Title", "Sub", "Body")
        assert notifier.sent == [("Title", "Sub", "Body")]

    async def test_notify_failure_is_swallowed(self):
        failing = MagicMock()
        failing.send = AsyncMock(side_effect=RuntimeError("network down"))
        host = HostRuntime(MemoryStore(), failing)
        await host.notify("Title")
        failing.send.assert_awaited_once_with("Title", "", "")

    async def test_close_releases_telegram_session(self):
        bot = MagicMock()
        bot.session.close = AsyncMock()
        host = HostRuntime(MemoryStore(), TelegramNotifier(chat_ids=["1"], bot=bot))
        await host.close()
        bot.session.close.assert_awaited_once()


class TestNotifiers:
    def test_format_skips_empty_parts(self):
        assert format_notification("T", "", "B") == "T\nB"

    async def test_null_notifier(self):
        await NullNotifier().send("T", "S", "B")

    async def test_telegram_notifier_sends_to_every_chat(self):
        bot = MagicMock()
        bot.send_message = AsyncMock()
        notifier = TelegramNotifier(chat_ids=["1", "2"], bot=bot)

        await notifier.send("Title", "Sub", "Body")

        assert bot.send_message.await_count == 2
        bot.send_message.assert_any_await(chat_id="1", text="Title\nSub\nBody")
        bot.send_message.assert_any_await(chat_id="2", text="Title\nSub\nBody")

    async def test_telegram_notifier_without_chats(self):
        bot = MagicMock()
        bot.send_message = AsyncMock()
        await TelegramNotifier(chat_ids=[], bot=bot).send("T", "S", "B")
        bot.send_message.assert_not_awaited()

    def test_telegram_notifier_requires_token_or_bot(self):
        with pytest.raises(ValueError):
            TelegramNotifier(chat_ids=["1"])


class TestCreateHost:
    """Backends are picked from [host] once."""

    def test_memory_and_log(self):
        config = HookboxConfig(timezone="UTC", host={"store": "memory"})
        host = create_host(config)
        assert isinstance(host.store, MemoryStore)
        assert isinstance(host.notifier, LogNotifier)

    def test_file_store_path(self, tmp_path: Path):
        path = tmp_path / "s.json"
        config = HookboxConfig(
            timezone="UTC", host={"store": "file", "store_path": str(path)}
        )
        host = create_host(config)
        assert isinstance(host.store, JSONFileStore)
        assert host.store.path == path

    def test_muted(self):
        config = HookboxConfig(timezone="UTC", host={"notifier": "none"})
        assert isinstance(create_host(config).notifier, NullNotifier)

    def test_telegram(self):
        config = HookboxConfig(
            timezone="UTC",
            host={"notifier": "telegram"},
            telegram={"bot_token": "123456:ABCdef", "notify_chat_ids": ["42"]},
        )
        assert isinstance(create_host(config).notifier, TelegramNotifier)
