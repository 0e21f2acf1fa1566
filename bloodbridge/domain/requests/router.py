"""Request router - FastAPI endpoints for need-blood / can-donate posts"""

import logging

from fastapi import APIRouter, Body, Depends
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ...auth import get_current_uid
from ...config import POST_RATE_LIMIT, POST_RATE_WINDOW_SECONDS
from ...database import get_db
from ...models import BloodRequest
from ...rate_limiter import create_rate_limiter
from ..feed.subscription import FeedHub, get_feed_hub
from .schemas import (
    AppointmentSummary,
    RequestDetailResponse,
    RequestResponse,
    ValidationResponse,
    parse_request_draft,
)
from .service import RequestService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/requests", tags=["Requests"])

limit_new_posts = create_rate_limiter(
    limit=POST_RATE_LIMIT, window_seconds=POST_RATE_WINDOW_SECONDS, key_prefix="create_request"
)


def get_request_service(
    db: Session = Depends(get_db), hub: FeedHub = Depends(get_feed_hub)
) -> RequestService:
    """Dependency injection for RequestService"""
    return RequestService(db, hub)


SERVER_STAMPED_KEYS = ("created_at", "createdAt", "updated_at", "updatedAt")


def _parse_draft(payload: dict):
    payload = {k: v for k, v in payload.items() if k not in SERVER_STAMPED_KEYS}
    try:
        return parse_request_draft(payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False, include_context=False)) from e


def _to_detail(request: BloodRequest, user_id: str) -> RequestDetailResponse:
    # Appointment details are only shown to the post's owner
    appointment = request.appointment if request.user_id == user_id else None
    return RequestDetailResponse(
        **RequestResponse.model_validate(request).model_dump(),
        appointment=AppointmentSummary.model_validate(appointment) if appointment else None,
    )


@router.post("/validate", response_model=ValidationResponse)
async def validate_request(
    payload: dict = Body(...),
    user_id: str = Depends(get_current_uid),
    service: RequestService = Depends(get_request_service),
):
    """Dry-run the required-field check so the form can enable its submit button"""
    result = service.validate(_parse_draft(payload), user_id)
    return ValidationResponse(valid=result.valid, field=result.field, reason=result.reason)


@router.post("", response_model=RequestDetailResponse, status_code=201)
async def create_request(
    payload: dict = Body(...),
    user_id: str = Depends(get_current_uid),
    service: RequestService = Depends(get_request_service),
    _: None = Depends(limit_new_posts),
):
    """Create a post; donor posts book their appointment slot at the same time"""
    request = service.create_request(_parse_draft(payload), user_id)
    return _to_detail(request, user_id)


@router.get("/mine", response_model=list[RequestResponse])
async def get_my_requests(
    user_id: str = Depends(get_current_uid),
    service: RequestService = Depends(get_request_service),
):
    return service.get_my_requests(user_id)


@router.get("/{request_id}", response_model=RequestDetailResponse)
async def get_request(
    request_id: str,
    user_id: str = Depends(get_current_uid),
    service: RequestService = Depends(get_request_service),
):
    return _to_detail(service.get_request(request_id), user_id)


@router.delete("/{request_id}")
async def delete_request(
    request_id: str,
    user_id: str = Depends(get_current_uid),
    service: RequestService = Depends(get_request_service),
):
    return service.delete_request(request_id, user_id)
