"""Camp request schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from ...shared.validators import clean_text, normalize_phone

CAMP_STATUSES = ("pending", "confirmed", "rejected")


class _CampFields(BaseModel):
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    organization_name: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    proposed_date: Optional[date] = None
    venue_address: Optional[str] = None
    expected_donors: Optional[int] = None
    facilities: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("organization_name", "contact_person", "venue_address", "facilities", "notes")
    @classmethod
    def trim(cls, v):
        return clean_text(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return normalize_phone(v)

    @field_validator("expected_donors")
    @classmethod
    def validate_expected_donors(cls, v):
        if v is not None and v < 1:
            raise ValueError("expected_donors must be at least 1")
        return v


class CampDraft(_CampFields):
    """Camp request form as entered by the organizer"""

    user_id: Optional[str] = None


class CampPatch(_CampFields):
    """Owner edits to a pending camp request; status and owner cannot be patched"""


class CampResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    organization_name: str
    contact_person: str
    phone: str
    proposed_date: date
    venue_address: str
    expected_donors: int
    facilities: Optional[str] = None
    notes: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime
    # Client hides the edit button when False
    editable: bool = False


def camp_to_document(camp) -> dict:
    return {
        "id": camp.id,
        "user_id": camp.user_id,
        "organization_name": camp.organization_name,
        "contact_person": camp.contact_person,
        "phone": camp.phone,
        "proposed_date": camp.proposed_date,
        "venue_address": camp.venue_address,
        "expected_donors": camp.expected_donors,
        "facilities": camp.facilities,
        "notes": camp.notes,
        "status": camp.status,
        "created_at": camp.created_at,
        "updated_at": camp.updated_at,
    }
