"""Feed router - filtered live feed, as a one-off read or a server-sent event stream"""

import json
import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from ...auth import get_current_uid
from ..requests.router import get_request_service
from ..requests.service import RequestService
from .query import FeedFilter, view_feed

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/feed", tags=["Feed"])


def get_feed_filter(
    blood_group: Optional[str] = Query(None),
    urgency: Optional[str] = Query(None),
    type: Optional[Literal["donor", "receiver"]] = Query(None),
    q: Optional[str] = Query(None, description="Search by name or location"),
) -> FeedFilter:
    return FeedFilter(blood_group=blood_group, urgency=urgency, type=type, free_text=q)


@router.get("")
async def get_feed(
    feed_filter: FeedFilter = Depends(get_feed_filter),
    _: str = Depends(get_current_uid),
    service: RequestService = Depends(get_request_service),
):
    """Most recent posts matching the filter, newest first"""
    service.load_feed()
    return view_feed(service.hub.snapshot, feed_filter).to_dict()


@router.get("/stream")
async def stream_feed(
    request: Request,
    feed_filter: FeedFilter = Depends(get_feed_filter),
    _: str = Depends(get_current_uid),
    service: RequestService = Depends(get_request_service),
):
    """Push a filtered view every time the feed changes, until the client disconnects"""
    service.load_feed()
    subscription = service.hub.subscribe()

    async def event_source():
        async with subscription:
            async for snapshot in subscription:
                if await request.is_disconnected():
                    logger.debug("📡 Feed stream client disconnected")
                    break
                view = view_feed(snapshot, feed_filter).to_dict()
                yield f"id: {snapshot.version}\ndata: {json.dumps(view, default=str)}\n\n"

    return StreamingResponse(
        event_source(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
