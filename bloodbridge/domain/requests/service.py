"""Request service - Business logic for need-blood / can-donate posts"""

import logging
from typing import Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...config import APPOINTMENT_BOOKING_REQUIRED, LOCATION_SCHEMA
from ...errors import NotFound, SlotUnavailable
from ...models import BloodRequest
from ..appointments.service import AppointmentService
from ..feed.subscription import FeedHub
from .lifecycle import ValidationResult, build_request_payload, validate_request_submission
from .repository import RequestRepository
from .schemas import DonorDraft, ReceiverDraft, request_to_document

logger = logging.getLogger(__name__)

Draft = Union[ReceiverDraft, DonorDraft]


class RequestService:
    """Service layer for request business logic"""

    def __init__(
        self,
        db: Session,
        hub: FeedHub,
        appointments: Optional[AppointmentService] = None,
        require_booking: bool = APPOINTMENT_BOOKING_REQUIRED,
        location_schema: str = LOCATION_SCHEMA,
    ):
        self.db = db
        self.hub = hub
        self.repo = RequestRepository()
        self.appointments = appointments or AppointmentService(db)
        self.require_booking = require_booking
        self.location_schema = location_schema

    def validate(self, draft: Draft, user_id: str) -> ValidationResult:
        draft = draft.model_copy(update={"user_id": user_id})
        return validate_request_submission(draft, self.require_booking, self.location_schema)

    def create_request(self, draft: Draft, user_id: str) -> BloodRequest:
        """
        Validate and persist a post. Donor posts book their appointment in the
        same transaction, so a lost slot leaves nothing behind.
        """
        # Timestamps are always set here, never taken from the client
        draft = draft.model_copy(update={"user_id": user_id, "created_at": None, "updated_at": None})
        validate_request_submission(draft, self.require_booking, self.location_schema).raise_for_invalid()
        payload = build_request_payload(draft)

        logger.info(f"📥 Creating {draft.type} request for user {user_id}")
        try:
            request = self.repo.add_request(self.db, payload)
            if draft.type == "donor" and draft.appointment_date and draft.appointment_time:
                self.appointments.stage_booking(
                    request.id, user_id, draft.appointment_date, draft.appointment_time
                )
            self.db.commit()
        except SlotUnavailable:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            if draft.type == "donor" and draft.appointment_date:
                raise SlotUnavailable(draft.appointment_date, draft.appointment_time) from e
            raise

        self.db.refresh(request)
        self.hub.upsert(request_to_document(request))
        logger.info(f"✅ Request {request.id} created ({request.type}, {request.blood_group})")
        return request

    def get_request(self, request_id: str) -> BloodRequest:
        """Any signed-in user can open a post from the feed"""
        request = self.repo.get_request_by_id(self.db, request_id)
        if not request:
            raise NotFound("Request not found")
        return request

    def get_my_requests(self, user_id: str) -> list[BloodRequest]:
        return self.repo.get_requests_for_user(self.db, user_id)

    def delete_request(self, request_id: str, user_id: str) -> dict:
        request = self.repo.get_request_by_id(self.db, request_id)
        if not request or request.user_id != user_id:
            raise NotFound("Request not found")

        self.repo.delete_request(self.db, request)
        self.hub.remove(request_id)
        logger.info(f"🗑️ Request {request_id} deleted by {user_id}")
        return {"message": "Request deleted"}

    def load_feed(self) -> None:
        """Re-read the feed window from the store, which may have been written by other workers"""
        posts = self.repo.get_recent_requests(self.db, self.hub.limit)
        self.hub.load(request_to_document(p) for p in posts)
        logger.debug(f"📊 Feed reloaded with {len(posts)} posts")
