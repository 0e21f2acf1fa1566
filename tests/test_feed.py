import asyncio

import pytest

from bloodbridge.domain.feed.query import FeedFilter, filter_feed, view_feed
from bloodbridge.domain.feed.subscription import FeedHub

POSTS = [
    {"id": "1", "blood_group": "O+", "type": "donor", "name": "X", "location": "Pune"},
    {"id": "2", "blood_group": "A+", "type": "receiver", "name": "Y", "location": "Pune", "urgency": "urgent"},
]


def post(post_id, created_at, **fields):
    data = {
        "id": post_id,
        "type": "receiver",
        "blood_group": "O+",
        "name": f"Post {post_id}",
        "location": "Hyderabad, Telangana",
        "urgency": "normal",
        "created_at": created_at,
    }
    data.update(fields)
    return data


class TestFilterFeed:
    def test_blood_group_filter(self):
        assert filter_feed(POSTS, FeedFilter(blood_group="O+")) == [POSTS[0]]

    def test_empty_filter_returns_everything_in_order(self):
        assert filter_feed(POSTS, FeedFilter()) == POSTS

    def test_matching_is_case_insensitive(self):
        assert filter_feed(POSTS, FeedFilter(blood_group="a+", type="RECEIVER")) == [POSTS[1]]

    def test_dimensions_are_anded(self):
        assert filter_feed(POSTS, FeedFilter(blood_group="O+", urgency="urgent")) == []
        assert filter_feed(POSTS, FeedFilter(blood_group="A+", urgency="Urgent")) == [POSTS[1]]

    def test_free_text_searches_name_and_location(self):
        assert filter_feed(POSTS, FeedFilter(free_text="pun")) == POSTS
        assert filter_feed(POSTS, FeedFilter(free_text=" y ")) == [POSTS[1]]
        assert filter_feed(POSTS, FeedFilter(free_text="Chennai")) == []

    def test_blank_dimensions_are_unconstrained(self):
        assert filter_feed(POSTS, FeedFilter(blood_group="", free_text="  ")) == POSTS

    def test_posts_missing_a_field_do_not_match_that_dimension(self):
        posts = [{"id": "3", "type": "donor", "name": None, "location": None}]
        assert filter_feed(posts, FeedFilter(urgency="urgent")) == []
        assert filter_feed(posts, FeedFilter(free_text="x")) == []

    def test_result_is_an_ordered_subsequence(self):
        posts = [post(str(i), f"2030-01-0{i}", blood_group="O+" if i % 2 else "B+") for i in range(1, 8)]

        result = filter_feed(posts, FeedFilter(blood_group="O+"))

        assert [p["id"] for p in result] == ["1", "3", "5", "7"]


class TestViewFeed:
    def test_loading_until_first_snapshot(self):
        view = view_feed(None, FeedFilter())
        assert view.status == "loading"
        assert view.to_dict() == {"status": "loading", "posts": []}

    def test_ready_and_empty_is_not_loading(self):
        hub = FeedHub()
        snapshot = hub.load([])

        view = view_feed(snapshot, FeedFilter(blood_group="AB-"))

        assert view.status == "ready"
        assert view.posts == []


class TestFeedHub:
    def test_snapshots_are_newest_first(self):
        hub = FeedHub()
        hub.load([post("a", "2030-01-01T10:00:00"), post("b", "2030-01-02T10:00:00")])
        hub.upsert(post("c", "2030-01-01T12:00:00"))

        assert [p["id"] for p in hub.snapshot.posts] == ["b", "c", "a"]

    def test_last_write_wins_per_id(self):
        hub = FeedHub()
        hub.upsert(post("a", "2030-01-01T10:00:00", urgency="normal"))
        hub.upsert(post("a", "2030-01-01T10:00:00", urgency="critical"))

        assert len(hub.snapshot.posts) == 1
        assert hub.snapshot.posts[0]["urgency"] == "critical"

    def test_collection_is_bounded(self):
        hub = FeedHub(limit=3)
        hub.load(post(str(i), f"2030-01-{i:02d}") for i in range(1, 6))

        assert [p["id"] for p in hub.snapshot.posts] == ["5", "4", "3"]

        hub.upsert(post("old", "2029-12-31"))
        assert "old" not in [p["id"] for p in hub.snapshot.posts]

    def test_remove_and_versions(self):
        hub = FeedHub()
        assert hub.snapshot is None

        first = hub.upsert(post("a", "2030-01-01"))
        second = hub.remove("a")

        assert second.version == first.version + 1
        assert second.posts == ()

    def test_snapshot_is_not_changed_by_later_writes(self):
        hub = FeedHub()
        before = hub.upsert(post("a", "2030-01-01"))
        hub.upsert(post("b", "2030-01-02"))

        assert [p["id"] for p in before.posts] == ["a"]


class TestFeedSubscription:
    def test_subscriber_gets_current_then_latest_snapshot(self):
        async def scenario():
            hub = FeedHub()
            hub.upsert(post("a", "2030-01-01"))

            async with hub.subscribe() as subscription:
                first = await subscription.__anext__()
                hub.upsert(post("b", "2030-01-02"))
                hub.upsert(post("c", "2030-01-03"))
                latest = await subscription.__anext__()
            return first, latest, hub.subscriber_count

        first, latest, remaining = asyncio.run(scenario())

        assert [p["id"] for p in first.posts] == ["a"]
        # Intermediate snapshots are skipped, never queued
        assert [p["id"] for p in latest.posts] == ["c", "b", "a"]
        assert remaining == 0

    def test_close_stops_a_waiting_iterator(self):
        async def scenario():
            hub = FeedHub()
            subscription = hub.subscribe()
            received = []

            async def consume():
                async for snapshot in subscription:
                    received.append(snapshot.version)

            task = asyncio.ensure_future(consume())
            await asyncio.sleep(0)
            hub.upsert(post("a", "2030-01-01"))
            while not received:
                await asyncio.sleep(0)
            subscription.close()
            await asyncio.wait_for(task, timeout=1)
            return received, subscription.closed, hub.subscriber_count

        received, closed, remaining = asyncio.run(scenario())

        assert received == [1]
        assert closed is True
        assert remaining == 0

    def test_closed_subscription_gets_no_more_snapshots(self):
        async def scenario():
            hub = FeedHub()
            subscription = hub.subscribe()
            subscription.close()
            hub.upsert(post("a", "2030-01-01"))
            with pytest.raises(StopAsyncIteration):
                await subscription.__anext__()

        asyncio.run(scenario())


def test_reloading_unchanged_posts_does_not_wake_subscribers():
    hub = FeedHub()
    posts = [post("a", "2030-01-01"), post("b", "2030-01-02")]
    first = hub.load(posts)

    again = hub.load(posts)
    changed = hub.load(posts + [post("c", "2030-01-03")])

    assert again is first
    assert changed.version == first.version + 1
