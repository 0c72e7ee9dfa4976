"""Shared test fixtures and factories."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from hookbox.config.models import HookboxConfig
from hookbox.config.paths import ENV_VAR, get_hookbox_home
from hookbox.host import HostRuntime, LogNotifier, MemoryStore

# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def hookbox_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOOKBOX_HOME at a temporary directory for every test."""
    home = tmp_path / "hookbox-home"
    monkeypatch.setenv(ENV_VAR, str(home))
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
    monkeypatch.delenv("HOOKBOX_LOG_LEVEL", raising=False)
    get_hookbox_home.cache_clear()
    yield home
    get_hookbox_home.cache_clear()


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def minimal_config() -> HookboxConfig:
    """Minimal valid configuration with an in-memory host."""
    return HookboxConfig(timezone="UTC", host={"store": "memory"})


@pytest.fixture
def config_toml_content(tmp_path: Path) -> str:
    """Valid TOML config content."""
    store_path = tmp_path / "store.json"
    return f"""
timezone = "UTC"

[host]
store = "file"
store_path = "{store_path}"
notifier = "log"

[video_cache]
max_entries = 3

[cron.basic]
enable = true

[[cron.adminpush]]
enable = true
rule = {{ name = "morning", cron = "0 0 8 * * *", msg = "Good morning @date@", form = "telegram" }}

[[cron.userpush]]
enable = false
rule = {{ name = "off", cron = "0 30 9 * * *", msg = "hi", userid = "42" }}
"""


@pytest.fixture
def config_file(tmp_path: Path, config_toml_content: str) -> Path:
    """Create a temporary config file."""
    config_path = tmp_path / "config.toml"
    config_path.write_text(config_toml_content)
    return config_path


# =============================================================================
# Host Fixtures
# =============================================================================


@pytest.fixture
def notifier() -> LogNotifier:
    return LogNotifier()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def host(store: MemoryStore, notifier: LogNotifier) -> HostRuntime:
    """Host runtime backed by memory, recording notifications."""
    return HostRuntime(store, notifier)


class FailingStore(MemoryStore):
    """MemoryStore whose writes always fail."""

    def save(self, key, value):
        raise OSError("disk full")


@pytest.fixture
def failing_host(notifier: LogNotifier) -> HostRuntime:
    return HostRuntime(FailingStore(), notifier)


class FixedClock:
    """Settable clock for date-sensitive tests."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime(2026, 10, 19, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


# =============================================================================
# CLI Test Helpers
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})
