"""Once-per-day notification gate."""

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from hookbox.host.base import Host

logger = logging.getLogger(__name__)

DEFAULT_DAILY_KEY = "sora_daily_check_date"

DAILY_TITLE = "Sora video script"
DAILY_BODY = "Script is running and ready to cache video links."


class DailyCheck:
    """Fires a notification the first time it runs on a given local date.

    The last-run date is stored in the host under ``key`` as YYYY-MM-DD.
    """

    def __init__(
        self,
        host: Host,
        key: str = DEFAULT_DAILY_KEY,
        timezone: str = "UTC",
        clock: Callable[[], datetime] | None = None,
        notify: bool = True,
    ):
        self._host = host
        self._key = key
        self._tz = ZoneInfo(timezone)
        self._clock = clock or (lambda: datetime.now(UTC))
        self._notify = notify

    def today(self) -> date:
        return self._clock().astimezone(self._tz).date()

    async def run(self, today: date | None = None) -> bool:
        """Record today's run. Returns True if this was the first run today."""
        today_str = (today or self.today()).isoformat()
        last_run = await asyncio.to_thread(self._host.read_value, self._key)
        if last_run == today_str:
            return False

        if not await asyncio.to_thread(self._host.write_value, self._key, today_str):
            logger.error(f"Failed to record daily run date {today_str}")
        logger.info(f"First run on {today_str}, sending daily notification")
        if self._notify:
            await self._host.notify(DAILY_TITLE, f"Date: {today_str}", DAILY_BODY)
        return True
