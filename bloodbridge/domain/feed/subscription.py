"""
Live feed snapshots.

The hub holds the bounded, most-recent-first post collection and hands out
immutable snapshots. Writers merge changes (last write for an id wins);
readers subscribe and iterate snapshots asynchronously. Everything runs on
the event loop thread, so no locking is needed.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from ...config import FEED_LIMIT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedSnapshot:
    version: int
    posts: tuple


def _recency_key(post: Mapping):
    return (str(post.get("created_at") or ""), str(post.get("id")))


class FeedSubscription:
    """
    Async iterator of snapshots for one listener.

    A slow listener only ever sees the latest snapshot; intermediate ones are
    skipped. Always close it (or use ``async with``) so the hub forgets it.
    """

    def __init__(self, hub: "FeedHub", initial: Optional[FeedSnapshot]):
        self._hub = hub
        self._latest = initial
        self._ready = asyncio.Event()
        self._closed = False
        if initial is not None:
            self._ready.set()

    @property
    def closed(self) -> bool:
        return self._closed

    def _push(self, snapshot: FeedSnapshot) -> None:
        self._latest = snapshot
        self._ready.set()

    def __aiter__(self):
        return self

    async def __anext__(self) -> FeedSnapshot:
        if self._closed:
            raise StopAsyncIteration
        await self._ready.wait()
        if self._closed:
            raise StopAsyncIteration
        self._ready.clear()
        return self._latest

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._hub._unsubscribe(self)
        # Wake a pending __anext__ so it can stop
        self._ready.set()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.close()


class FeedHub:
    def __init__(self, limit: int = FEED_LIMIT):
        self.limit = limit
        self._posts: dict[str, dict] = {}
        self._snapshot: Optional[FeedSnapshot] = None
        self._subscribers: set[FeedSubscription] = set()

    @property
    def snapshot(self) -> Optional[FeedSnapshot]:
        """Latest snapshot, None until the feed has been loaded"""
        return self._snapshot

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def load(self, posts: Iterable[Mapping]) -> FeedSnapshot:
        """Replace the collection with a fresh read from the store"""
        self._posts = {str(p["id"]): dict(p) for p in posts}
        return self._publish()

    def upsert(self, post: Mapping) -> FeedSnapshot:
        self._posts[str(post["id"])] = dict(post)
        return self._publish()

    def remove(self, post_id: str) -> FeedSnapshot:
        self._posts.pop(str(post_id), None)
        return self._publish()

    def subscribe(self) -> FeedSubscription:
        subscription = FeedSubscription(self, self._snapshot)
        self._subscribers.add(subscription)
        logger.debug(f"📡 Feed subscriber added ({len(self._subscribers)} active)")
        return subscription

    def _unsubscribe(self, subscription: FeedSubscription) -> None:
        self._subscribers.discard(subscription)
        logger.debug(f"📡 Feed subscriber removed ({len(self._subscribers)} active)")

    def _publish(self) -> FeedSnapshot:
        ordered = sorted(self._posts.values(), key=_recency_key, reverse=True)[: self.limit]
        self._posts = {str(p["id"]): p for p in ordered}
        # A reload that found nothing new is not broadcast
        if self._snapshot is not None and tuple(ordered) == self._snapshot.posts:
            return self._snapshot
        version = self._snapshot.version + 1 if self._snapshot else 1
        self._snapshot = FeedSnapshot(version=version, posts=tuple(ordered))
        for subscription in list(self._subscribers):
            subscription._push(self._snapshot)
        return self._snapshot


feed_hub = FeedHub()


def get_feed_hub() -> FeedHub:
    """FastAPI dependency for the process-wide feed hub"""
    return feed_hub
