"""Camp router - FastAPI endpoints for donation camp requests"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_uid
from ...config import POST_RATE_LIMIT, POST_RATE_WINDOW_SECONDS
from ...database import get_db
from ...models import CampRequest
from ...rate_limiter import create_rate_limiter
from .schemas import CampDraft, CampPatch, CampResponse
from .service import CampService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/camps", tags=["Camps"])

limit_new_camps = create_rate_limiter(
    limit=POST_RATE_LIMIT, window_seconds=POST_RATE_WINDOW_SECONDS, key_prefix="create_camp"
)


def get_camp_service(db: Session = Depends(get_db)) -> CampService:
    """Dependency injection for CampService"""
    return CampService(db)


def _to_response(camp: CampRequest) -> CampResponse:
    response = CampResponse.model_validate(camp)
    response.editable = camp.status == "pending"
    return response


@router.post("", response_model=CampResponse, status_code=201)
async def create_camp(
    data: CampDraft,
    user_id: str = Depends(get_current_uid),
    service: CampService = Depends(get_camp_service),
    _: None = Depends(limit_new_camps),
):
    """Submit a camp request for review"""
    return _to_response(service.create_camp(data, user_id))


@router.get("/mine", response_model=list[CampResponse])
async def get_my_camps(
    user_id: str = Depends(get_current_uid),
    service: CampService = Depends(get_camp_service),
):
    return [_to_response(c) for c in service.get_my_camps(user_id)]


@router.get("/{camp_id}", response_model=CampResponse)
async def get_camp(
    camp_id: str,
    user_id: str = Depends(get_current_uid),
    service: CampService = Depends(get_camp_service),
):
    return _to_response(service.get_camp(camp_id, user_id))


@router.patch("/{camp_id}", response_model=CampResponse)
async def update_camp(
    camp_id: str,
    patch: CampPatch,
    user_id: str = Depends(get_current_uid),
    service: CampService = Depends(get_camp_service),
):
    """Edit a camp request; rejected with 409 once it has been reviewed"""
    return _to_response(service.update_camp(camp_id, patch, user_id))


@router.delete("/{camp_id}")
async def delete_camp(
    camp_id: str,
    user_id: str = Depends(get_current_uid),
    service: CampService = Depends(get_camp_service),
):
    return service.delete_camp(camp_id, user_id)
