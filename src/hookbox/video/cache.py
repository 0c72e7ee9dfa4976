"""Bounded video URL cache with first-in eviction.

The cache is a JSON object stored under one host key. Key order is insertion
order, and it is the only ordering that matters: when the cache is full the
first key is evicted. Lookups never reorder anything (FIFO, not LRU).

The mapping is loaded from the host on every call; nothing is kept in memory
between calls.
"""

import logging

from hookbox.host.base import Host
from hookbox.video.types import CacheEntry, InsertResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 20
DEFAULT_MAP_KEY = "sora_video_url_map"


class VideoUrlCache:
    """Maps video identifiers to their resolved master URLs."""

    def __init__(
        self,
        host: Host,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        key: str = DEFAULT_MAP_KEY,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._host = host
        self._max_entries = max_entries
        self._key = key

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def key(self) -> str:
        return self._key

    def _load(self) -> dict[str, str]:
        mapping = self._host.read_mapping(self._key)
        return {k: v for k, v in mapping.items() if isinstance(v, str) and v}

    def lookup(self, identifier: str) -> str | None:
        """Get the cached URL for ``identifier``. Never mutates the cache."""
        if not identifier:
            return None
        return self._load().get(identifier)

    def put(self, identifier: str, url: str) -> InsertResult:
        """Insert ``identifier`` unless it is already cached.

        Raises:
            ValueError: If identifier is empty.
        """
        if not identifier:
            raise ValueError("identifier must be non-empty")

        with self._host.lock(self._key):
            mapping = self._load()
            if identifier in mapping:
                logger.info(f"Video {identifier} already cached, keeping first URL")
                return InsertResult(stored=True, created=False)

            evicted: list[str] = []
            while len(mapping) >= self._max_entries:
                oldest = next(iter(mapping))
                del mapping[oldest]
                evicted.append(oldest)
                logger.info(
                    f"Cache full ({self._max_entries} entries), "
                    f"evicted oldest: {oldest}"
                )

            mapping[identifier] = url
            stored = self._host.write_mapping(self._key, mapping)

        if stored:
            logger.info(f"Cached master URL for video {identifier}")
        else:
            logger.error(f"Failed to persist master URL for video {identifier}")
        return InsertResult(stored=stored, created=True, evicted=tuple(evicted))

    def insert(self, identifier: str, url: str) -> bool:
        """Insert and report whether the cache was persisted."""
        return self.put(identifier, url).stored

    def entries(self) -> list[CacheEntry]:
        """All entries, oldest first."""
        return [
            CacheEntry(identifier=identifier, resolved_url=url, position=i)
            for i, (identifier, url) in enumerate(self._load().items())
        ]

    def clear(self) -> int:
        """Remove every entry. Returns the number removed."""
        with self._host.lock(self._key):
            count = len(self._load())
            if count and not self._host.write_mapping(self._key, {}):
                return 0
        return count

    def __len__(self) -> int:
        return len(self._load())
