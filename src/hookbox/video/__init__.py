"""Video URL cache: caches master media URLs and redirects to them.

Public API:
- VideoRewriter: Per-request handler (cache master URLs, redirect the rest)
- VideoUrlCache: Bounded identifier -> URL cache with first-in eviction
- DailyCheck: Once-per-day notification gate
- extract_video_id: Identifier extraction from a URL
"""

from hookbox.video.cache import VideoUrlCache
from hookbox.video.daily import DailyCheck
from hookbox.video.extract import IdExtractor, extract_video_id
from hookbox.video.rewrite import VideoRewriter
from hookbox.video.types import CacheEntry, InsertResult, RewriteResult

__all__ = [
    "CacheEntry",
    "DailyCheck",
    "IdExtractor",
    "InsertResult",
    "RewriteResult",
    "VideoRewriter",
    "VideoUrlCache",
    "extract_video_id",
]
