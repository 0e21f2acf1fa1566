"""
Feed filtering.

Posts are JSON-like documents (mappings) already ordered most recent first.
Filtering keeps that order; it never re-sorts.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

SEARCHABLE_FIELDS = ("name", "location")


def _norm(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value.lower() or None


@dataclass(frozen=True)
class FeedFilter:
    """Compound feed filter, ANDed together. A None dimension is unconstrained."""

    blood_group: Optional[str] = None
    urgency: Optional[str] = None
    type: Optional[str] = None
    free_text: Optional[str] = None

    def matches(self, post: Mapping) -> bool:
        blood_group = _norm(self.blood_group)
        if blood_group and _norm(post.get("blood_group")) != blood_group:
            return False

        urgency = _norm(self.urgency)
        if urgency and _norm(post.get("urgency")) != urgency:
            return False

        post_type = _norm(self.type)
        if post_type and _norm(post.get("type")) != post_type:
            return False

        text = _norm(self.free_text)
        if text and not any(text in (_norm(post.get(f)) or "") for f in SEARCHABLE_FIELDS):
            return False

        return True


def filter_feed(posts: Iterable[Mapping], feed_filter: FeedFilter) -> list[Mapping]:
    return [post for post in posts if feed_filter.matches(post)]


@dataclass(frozen=True)
class FeedView:
    """What a client renders: "loading" until the first snapshot, then "ready" (possibly empty)"""

    status: str
    posts: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"status": self.status, "posts": list(self.posts)}


def view_feed(snapshot, feed_filter: FeedFilter) -> FeedView:
    if snapshot is None:
        return FeedView(status="loading")
    return FeedView(status="ready", posts=filter_feed(snapshot.posts, feed_filter))
