"""
Camp request rules.

A camp request is submitted as ``pending``; a reviewer confirms or rejects
it. The owner may edit it only while it is still pending.
"""

from datetime import datetime, timezone
from typing import Mapping, Optional

from ...errors import AuthenticationRequired, InvalidTransition, MissingRequiredField, NotEditable
from ...shared.validators import clean_text
from .schemas import CampDraft, CampPatch

REQUIRED_CAMP_FIELDS = (
    "organization_name",
    "contact_person",
    "phone",
    "proposed_date",
    "venue_address",
    "expected_donors",
)

CAMP_TRANSITIONS = {
    "pending": ("confirmed", "rejected"),
    "confirmed": (),
    "rejected": (),
}


def validate_camp_submission(draft: CampDraft) -> None:
    """Raise for the first missing field, in form order"""
    if not clean_text(draft.user_id):
        raise AuthenticationRequired()
    for field in REQUIRED_CAMP_FIELDS:
        if clean_text(getattr(draft, field)) is None:
            raise MissingRequiredField(field, f"{field.replace('_', ' ').capitalize()} is required")


def build_camp_payload(draft: CampDraft, now: Optional[datetime] = None) -> dict:
    validate_camp_submission(draft)
    now = now or datetime.now(timezone.utc)
    payload = {"user_id": draft.user_id}
    for field in REQUIRED_CAMP_FIELDS + ("facilities", "notes"):
        payload[field] = clean_text(getattr(draft, field))
    payload.update(status="pending", created_at=now, updated_at=now)
    return payload


def edit_camp_request(existing: Mapping, patch: CampPatch, now: Optional[datetime] = None) -> dict:
    """Merge the owner's edits into a pending camp request"""
    if existing["status"] != "pending":
        raise NotEditable(existing["status"])

    updated = dict(existing)
    for key, value in patch.model_dump(exclude_unset=True).items():
        if value is not None:
            updated[key] = value
    updated["updated_at"] = now or datetime.now(timezone.utc)
    return updated


def review_camp_request(existing: Mapping, new_status: str, now: Optional[datetime] = None) -> dict:
    current = existing["status"]
    if new_status not in CAMP_TRANSITIONS.get(current, ()):
        raise InvalidTransition(current, new_status)

    updated = dict(existing)
    updated["status"] = new_status
    updated["updated_at"] = now or datetime.now(timezone.utc)
    return updated
