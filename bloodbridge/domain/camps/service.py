"""Camp service - Business logic for donation camp requests"""

import logging

from sqlalchemy.orm import Session

from ...errors import NotFound
from ...models import CampRequest
from .lifecycle import build_camp_payload, edit_camp_request, review_camp_request
from .repository import CampRepository
from .schemas import CampDraft, CampPatch, camp_to_document

logger = logging.getLogger(__name__)


class CampService:
    """Service layer for camp request business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CampRepository()

    def create_camp(self, draft: CampDraft, user_id: str) -> CampRequest:
        payload = build_camp_payload(draft.model_copy(update={"user_id": user_id}))
        camp = self.repo.create_camp(self.db, payload)
        logger.info(f"✅ Camp request {camp.id} submitted by {user_id} for {camp.proposed_date}")
        return camp

    def get_my_camps(self, user_id: str) -> list[CampRequest]:
        return self.repo.get_camps_for_user(self.db, user_id)

    def get_camp(self, camp_id: str, user_id: str) -> CampRequest:
        camp = self.repo.get_camp_by_id(self.db, camp_id, user_id)
        if not camp:
            raise NotFound("Camp request not found")
        return camp

    def update_camp(self, camp_id: str, patch: CampPatch, user_id: str) -> CampRequest:
        camp = self.get_camp(camp_id, user_id)
        current = camp_to_document(camp)
        updated = edit_camp_request(current, patch)
        changes = {k: v for k, v in updated.items() if current.get(k) != v}
        camp = self.repo.update_camp(self.db, camp, **changes)
        logger.info(f"✏️ Camp request {camp_id} updated ({', '.join(sorted(changes))})")
        return camp

    def delete_camp(self, camp_id: str, user_id: str) -> dict:
        camp = self.get_camp(camp_id, user_id)
        self.repo.delete_camp(self.db, camp)
        logger.info(f"🗑️ Camp request {camp_id} deleted by {user_id}")
        return {"message": "Camp request deleted"}

    def review_camp(self, camp_id: str, new_status: str) -> CampRequest:
        """Record a reviewer's decision (confirmed / rejected)"""
        camp = self.repo.get_camp_by_id(self.db, camp_id)
        if not camp:
            raise NotFound("Camp request not found")
        updated = review_camp_request(camp_to_document(camp), new_status)
        camp = self.repo.update_camp(self.db, camp, status=updated["status"], updated_at=updated["updated_at"])
        logger.info(f"✅ Camp request {camp_id} transitioned: pending → {new_status}")
        return camp
