"""Request rewrite handler for video URLs.

Each intercepted request URL goes through handle():

1. The daily check runs (one notification per local day).
2. A master URL (contains ``master_marker``) is cached under its video id
   and passed through untouched.
3. Any other URL with a video id is answered with a 302 to the cached master
   URL, if there is one. Everything else passes through.

Store access runs in a worker thread so file locking never blocks the event
loop.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from hookbox.config.models import VideoCacheConfig
from hookbox.host.base import Host
from hookbox.video.cache import VideoUrlCache
from hookbox.video.daily import DailyCheck
from hookbox.video.extract import IdExtractor
from hookbox.video.types import RewriteResult

logger = logging.getLogger(__name__)

CACHED_TITLE = "Sora cache updated"
CACHED_BODY = "Master URL saved; later requests will be redirected to it."


class VideoRewriter:
    """Caches master video URLs and redirects later requests to them."""

    def __init__(
        self,
        host: Host,
        settings: VideoCacheConfig | None = None,
        timezone: str = "UTC",
        clock: Callable[[], datetime] | None = None,
    ):
        self._host = host
        self._settings = settings or VideoCacheConfig()
        self._extractor = IdExtractor(
            path_pattern=self._settings.path_pattern,
            query_param=self._settings.query_param,
        )
        self._cache = VideoUrlCache(
            host,
            max_entries=self._settings.max_entries,
            key=self._settings.map_key,
        )
        self._daily = DailyCheck(
            host,
            key=self._settings.daily_key,
            timezone=timezone,
            clock=clock,
            notify=self._settings.daily_notification,
        )

    @property
    def cache(self) -> VideoUrlCache:
        return self._cache

    @property
    def daily(self) -> DailyCheck:
        return self._daily

    def is_master_url(self, url: str) -> bool:
        return self._settings.master_marker in url

    async def handle(self, url: str | None) -> RewriteResult:
        """Process one intercepted request. Never raises."""
        try:
            await self._daily.run()
            if not url:
                logger.warning("Request URL is empty, nothing to do")
                return RewriteResult.pass_through("empty_url")
            if self.is_master_url(url):
                return await self._handle_master(url)
            return await self._handle_query(url)
        except Exception:
            logger.exception("Video rewrite failed, passing request through")
            return RewriteResult.pass_through("error")

    async def _handle_master(self, url: str) -> RewriteResult:
        video_id = self._extractor.extract(url)
        if not video_id:
            logger.info(f"No video id in master URL: {url}")
            return RewriteResult.pass_through("no_video_id")

        logger.info(f"Captured master URL for video {video_id}")
        result = await asyncio.to_thread(self._cache.put, video_id, url)
        if result.created and result.stored and self._settings.notify_on_cache:
            await self._host.notify(CACHED_TITLE, f"Video ID: {video_id}", CACHED_BODY)
        reason = "cached" if result.created else "already_cached"
        if not result.stored:
            reason = "cache_write_failed"
        return RewriteResult.pass_through(reason, video_id=video_id)

    async def _handle_query(self, url: str) -> RewriteResult:
        video_id = self._extractor.extract(url)
        if not video_id:
            logger.info(f"No video id in request URL: {url}")
            return RewriteResult.pass_through("no_video_id")

        logger.info(f"Video request for {video_id}, checking cache")
        cached_url = await asyncio.to_thread(self._cache.lookup, video_id)
        if cached_url:
            logger.info(f"Cache hit for {video_id}, redirecting to master URL")
            return RewriteResult.redirect(cached_url, video_id=video_id)

        logger.info(f"No cached URL for {video_id}, passing request through")
        return RewriteResult.pass_through("cache_miss", video_id=video_id)
