"""Video identifier extraction from request URLs."""

import re
from dataclasses import dataclass, field
from urllib.parse import parse_qsl

DEFAULT_PATH_PATTERN = r"/videos/([a-zA-Z0-9]+)/"
DEFAULT_QUERY_PARAM = "id"


@dataclass(frozen=True)
class IdExtractor:
    """Pulls a video identifier out of a URL.

    The structured path (``/videos/<id>/``) wins over the query parameter
    (``?id=<id>``). Empty values count as no match.
    """

    path_pattern: str = DEFAULT_PATH_PATTERN
    query_param: str = DEFAULT_QUERY_PARAM
    _compiled: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_compiled", re.compile(self.path_pattern))

    def extract(self, url: str) -> str | None:
        if not url:
            return None

        match = self._compiled.search(url)
        if match and match.group(1):
            return match.group(1)

        if "?" not in url:
            return None
        # Only the segment between the first and second "?" is the query
        query = url.split("?")[1].split("#", 1)[0]
        for name, value in parse_qsl(query, keep_blank_values=True):
            if name == self.query_param:
                return value or None
        return None


_default_extractor = IdExtractor()


def extract_video_id(url: str, extractor: IdExtractor | None = None) -> str | None:
    """Extract a video identifier from ``url``, or None if there isn't one."""
    return (extractor or _default_extractor).extract(url)
