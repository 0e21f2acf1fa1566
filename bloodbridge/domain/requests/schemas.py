"""Request domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from ...shared.validators import clean_text, normalize_blood_group, normalize_phone

URGENCY_LEVELS = ("normal", "soon", "urgent", "critical")
GENDERS = ("Male", "Female", "Other")


class Location(BaseModel):
    """Structured location picked from the region directory"""

    model_config = ConfigDict(extra="ignore")

    state: Optional[str] = None
    district: Optional[str] = None
    constituency: Optional[str] = None
    municipality: Optional[str] = None
    area: Optional[str] = None
    hospital: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def trim(cls, v):
        return clean_text(v)


class _RequestDraftBase(BaseModel):
    """Fields shared by receiver and donor drafts, as typed into the form"""

    # Accept both the mobile client's camelCase keys and stored snake_case keys
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    user_id: Optional[str] = None
    name: Optional[str] = None
    gender: Optional[str] = None
    blood_group: Optional[str] = None
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    location: Union[Location, str, None] = None
    location_structured: Optional[Location] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("blood_group")
    @classmethod
    def validate_blood_group(cls, v):
        return normalize_blood_group(v)

    @field_validator("phone", "whatsapp")
    @classmethod
    def validate_phone(cls, v):
        return normalize_phone(v)


class ReceiverDraft(_RequestDraftBase):
    """Draft of a "need blood" post"""

    type: Literal["receiver"] = "receiver"
    purpose: Optional[str] = None
    urgency: Optional[str] = None
    patient_details: Optional[str] = None
    disease: Optional[str] = None

    @field_validator("urgency")
    @classmethod
    def validate_urgency(cls, v):
        v = clean_text(v)
        if v is None:
            return v
        v = v.lower()
        if v not in URGENCY_LEVELS:
            raise ValueError(f"urgency must be one of {', '.join(URGENCY_LEVELS)}")
        return v


class DonorDraft(_RequestDraftBase):
    """Draft of a "can donate" post, optionally with the appointment being booked"""

    type: Literal["donor"] = "donor"
    prev_donation_date: Optional[date] = None
    available_to_donate: Optional[bool] = True
    medical_history: Optional[str] = None
    appointment_date: Optional[date] = None
    appointment_time: Optional[str] = None


RequestDraft = Annotated[Union[ReceiverDraft, DonorDraft], Field(discriminator="type")]

_draft_adapter = TypeAdapter(RequestDraft)


def parse_request_draft(data: dict) -> Union[ReceiverDraft, DonorDraft]:
    """Parse a raw form dict (or a stored payload) into the matching draft type"""
    return _draft_adapter.validate_python(data)


class ValidationResponse(BaseModel):
    valid: bool
    field: Optional[str] = None
    reason: Optional[str] = None


class AppointmentSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    appointment_date: date
    appointment_time: str
    blood_bank_location: Optional[str] = None
    appointment_status: str
    donation_status: str


class RequestResponse(BaseModel):
    """Schema for request response (also the document shape used by the feed)"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    type: str
    user_id: str
    name: str
    gender: Optional[str] = None
    blood_group: str
    phone: str
    whatsapp: Optional[str] = None
    location: Optional[str] = None
    location_structured: Optional[dict] = None
    description: Optional[str] = None
    purpose: Optional[str] = None
    urgency: Optional[str] = None
    patient_details: Optional[str] = None
    disease: Optional[str] = None
    prev_donation_date: Optional[date] = None
    available_to_donate: Optional[bool] = None
    medical_history: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class RequestDetailResponse(RequestResponse):
    appointment: Optional[AppointmentSummary] = None


def request_to_document(request) -> dict:
    """JSON-ready document for a stored request"""
    return RequestResponse.model_validate(request).model_dump(mode="json")
