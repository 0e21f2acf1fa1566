"""
Request lifecycle rules.

Pure functions that decide whether a request draft can be submitted and build
the exact document to persist. Nothing here touches the database or reads the
signed-in user from ambient state: the caller passes ``user_id`` on the draft.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from ...config import APPOINTMENT_BOOKING_REQUIRED, LOCATION_SCHEMA
from ...errors import AuthenticationRequired, MissingRequiredField
from ...shared.validators import clean_text
from .schemas import DonorDraft, Location, ReceiverDraft

RECEIVER_FIELDS = ("purpose", "urgency", "patient_details", "disease")
DONOR_FIELDS = ("prev_donation_date", "available_to_donate", "medical_history")

# Order in which the composed display location is built
LOCATION_DISPLAY_ORDER = ("hospital", "area", "municipality", "district", "constituency", "state")

LOCATION_LEVELS = {
    "district": ("district",),
    "constituency": ("constituency",),
    "both": ("district", "constituency"),
}

FIELD_PROMPTS = {
    "name": "Please enter your name",
    "blood_group": "Please select a blood group",
    "phone": "Please enter a phone number",
    "location.state": "Please select a state",
    "location.district": "Please select a district",
    "location.constituency": "Please select a constituency",
    "urgency": "Please select how urgently blood is needed",
    "appointment_date": "Please pick an appointment date",
    "appointment_time": "Please pick an appointment time slot",
}

Draft = Union[ReceiverDraft, DonorDraft]


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    field: Optional[str] = None
    reason: Optional[str] = None

    def raise_for_invalid(self) -> None:
        if not self.valid:
            raise MissingRequiredField(self.field, self.reason)


def structured_location(draft: Draft) -> Optional[Location]:
    """The draft's structured location, whichever field it was entered in"""
    if draft.location_structured is not None:
        return draft.location_structured
    if isinstance(draft.location, Location):
        return draft.location
    return None


def compose_location(location: Location) -> Optional[str]:
    parts = [getattr(location, key) for key in LOCATION_DISPLAY_ORDER]
    return ", ".join(p for p in parts if p) or None


def validate_request_submission(
    draft: Draft,
    require_booking: bool = APPOINTMENT_BOOKING_REQUIRED,
    location_schema: str = LOCATION_SCHEMA,
) -> ValidationResult:
    """
    Check a draft against the required-field contract for its type.

    Reports the first missing field, in form order. A draft without a user id
    raises AuthenticationRequired instead of returning a result.
    """
    if not clean_text(draft.user_id):
        raise AuthenticationRequired()

    if location_schema not in LOCATION_LEVELS:
        raise ValueError(f"Unknown location schema: {location_schema}")

    location = structured_location(draft) or Location()
    checks = [
        ("name", draft.name),
        ("blood_group", draft.blood_group),
        ("phone", draft.phone),
        ("location.state", location.state),
    ]
    for level in LOCATION_LEVELS[location_schema]:
        checks.append((f"location.{level}", getattr(location, level)))

    if draft.type == "receiver":
        checks.append(("urgency", draft.urgency))
    elif require_booking or draft.appointment_date or clean_text(draft.appointment_time):
        # Without mandatory booking a donor may skip the appointment, but not half of it
        checks.append(("appointment_date", draft.appointment_date))
        checks.append(("appointment_time", draft.appointment_time))

    for field, value in checks:
        if clean_text(value) is None:
            return ValidationResult(valid=False, field=field, reason=FIELD_PROMPTS[field])
    return ValidationResult(valid=True)


def can_submit(
    draft: Draft,
    require_booking: bool = APPOINTMENT_BOOKING_REQUIRED,
    location_schema: str = LOCATION_SCHEMA,
) -> bool:
    """Derived flag for enabling the submit button"""
    if not clean_text(draft.user_id):
        return False
    return validate_request_submission(draft, require_booking, location_schema).valid


def build_request_payload(draft: Draft, now: Optional[datetime] = None) -> dict:
    """
    Build the document to persist for a request draft.

    The field group that does not belong to the draft's type is nulled,
    strings are trimmed, whatsapp falls back to phone and timestamps are only
    stamped when the draft does not already carry them, so feeding the result
    back in as a draft yields the same payload.
    """
    now = now or datetime.now(timezone.utc)

    location = structured_location(draft)
    if location is not None:
        location_text = compose_location(location)
        location_structured = location.model_dump()
    else:
        location_text = clean_text(draft.location)
        location_structured = None

    phone = clean_text(draft.phone)
    payload = {
        "type": draft.type,
        "user_id": clean_text(draft.user_id),
        "name": clean_text(draft.name),
        "gender": clean_text(draft.gender),
        "blood_group": clean_text(draft.blood_group),
        "phone": phone,
        "whatsapp": clean_text(draft.whatsapp) or phone,
        "location": location_text,
        "location_structured": location_structured,
        "description": clean_text(draft.description),
        "created_at": draft.created_at or now,
        "updated_at": draft.updated_at or now,
    }
    payload.update(dict.fromkeys(RECEIVER_FIELDS + DONOR_FIELDS))

    if draft.type == "receiver":
        for field in RECEIVER_FIELDS:
            payload[field] = clean_text(getattr(draft, field))
    else:
        payload["prev_donation_date"] = draft.prev_donation_date
        payload["available_to_donate"] = bool(draft.available_to_donate)
        payload["medical_history"] = clean_text(draft.medical_history)

    return payload
