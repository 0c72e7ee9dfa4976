"""Video cache types.

Public types:
- CacheEntry: One identifier -> master URL record
- InsertResult: Outcome of a cache insert
- RewriteResult: What the rewrite handler tells the host to do
"""

from dataclasses import dataclass
from typing import Any

REDIRECT_STATUS = 302


@dataclass(frozen=True)
class CacheEntry:
    """A cached master URL for one video identifier."""

    identifier: str
    resolved_url: str
    position: int = 0  # 0 = oldest, evicted first

    def to_dict(self) -> dict[str, Any]:
        return {
            "identifier": self.identifier,
            "resolved_url": self.resolved_url,
            "position": self.position,
        }


@dataclass(frozen=True)
class InsertResult:
    """Outcome of VideoUrlCache.put().

    stored: the mapping on disk reflects the insert (False only when the
    persistence write failed).
    created: the identifier was new; False for an idempotent re-insert.
    evicted: identifiers removed to make room, oldest first.
    """

    stored: bool
    created: bool
    evicted: tuple[str, ...] = ()


@dataclass(frozen=True)
class RewriteResult:
    """Instruction for the host: redirect, or leave the request alone."""

    action: str  # "redirect" | "pass"
    location: str | None = None
    status: int | None = None
    video_id: str | None = None
    reason: str = ""

    @classmethod
    def redirect(cls, location: str, video_id: str | None = None) -> "RewriteResult":
        return cls(
            action="redirect",
            location=location,
            status=REDIRECT_STATUS,
            video_id=video_id,
            reason="cache_hit",
        )

    @classmethod
    def pass_through(
        cls, reason: str, video_id: str | None = None
    ) -> "RewriteResult":
        return cls(action="pass", video_id=video_id, reason=reason)

    @property
    def is_redirect(self) -> bool:
        return self.action == "redirect"

    def to_response(self) -> dict[str, Any]:
        """Host response payload; an empty object leaves the request unmodified."""
        if not self.is_redirect:
            return {}
        return {
            "response": {
                "status": self.status,
                "headers": {"Location": self.location},
            }
        }
