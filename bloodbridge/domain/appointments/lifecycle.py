"""
Appointment booking and status transitions.

Booking only checks the slot against the bookings the caller read for that
date. The storage layer has the final word: ``slot_key`` is unique, so a
booking that raced another one fails on insert and is reported as
SlotUnavailable by the service.
"""

import logging
from datetime import date, datetime, timezone
from typing import Iterable, Mapping, Optional, Sequence

from ...config import BLOOD_BANK_LOCATION, DAILY_SLOTS
from ...errors import AuthenticationRequired, InvalidTransition, SlotUnavailable
from .slots import free_slots

logger = logging.getLogger(__name__)

APPOINTMENT_TRANSITIONS = {
    "pending_approval": ("approved", "rejected"),
    "approved": (),
    "rejected": (),
}

DONATION_TRANSITIONS = {
    "pending": ("completed", "cancelled"),
    "completed": (),
    "cancelled": (),
}


def slot_key(appointment_date: date, appointment_time: str) -> str:
    return f"{appointment_date.isoformat()}|{appointment_time}"


def book_appointment(
    request_id: str,
    user_id: str,
    appointment_date: date,
    appointment_time: str,
    existing_bookings_for_date: Iterable[str],
    all_slots: Sequence[str] = DAILY_SLOTS,
    blood_bank_location: str = BLOOD_BANK_LOCATION,
    now: Optional[datetime] = None,
) -> dict:
    """Build a pending appointment document for a free slot, or raise SlotUnavailable"""
    if not user_id:
        raise AuthenticationRequired()

    if appointment_time not in free_slots(all_slots, existing_bookings_for_date):
        logger.info(f"⚠️ Slot {appointment_time} on {appointment_date} is not free")
        raise SlotUnavailable(appointment_date, appointment_time)

    now = now or datetime.now(timezone.utc)
    return {
        "request_id": request_id,
        "user_id": user_id,
        "appointment_date": appointment_date,
        "appointment_time": appointment_time,
        "slot_key": slot_key(appointment_date, appointment_time),
        "blood_bank_location": blood_bank_location,
        "appointment_status": "pending_approval",
        "donation_status": "pending",
        "created_at": now,
        "updated_at": now,
    }


def transition_appointment(
    appointment: Mapping,
    appointment_status: Optional[str] = None,
    donation_status: Optional[str] = None,
    now: Optional[datetime] = None,
) -> dict:
    """
    Apply a reviewer's status change and return the updated document.

    Rules:
    - pending_approval → approved | rejected
    - pending → completed | cancelled, and completing needs an approved appointment
    - a rejected appointment is cancelled as a donation
    - rejected or cancelled appointments give their slot back
    """
    updated = dict(appointment)
    current_appointment = appointment["appointment_status"]
    current_donation = appointment["donation_status"]

    if appointment_status is not None and appointment_status != current_appointment:
        if appointment_status not in APPOINTMENT_TRANSITIONS.get(current_appointment, ()):
            raise InvalidTransition(current_appointment, appointment_status)
        updated["appointment_status"] = appointment_status

    if donation_status is not None and donation_status != current_donation:
        if donation_status not in DONATION_TRANSITIONS.get(current_donation, ()):
            raise InvalidTransition(current_donation, donation_status)
        if donation_status == "completed" and updated["appointment_status"] != "approved":
            raise InvalidTransition(updated["appointment_status"], donation_status)
        updated["donation_status"] = donation_status

    if updated["appointment_status"] == "rejected" and updated["donation_status"] == "pending":
        updated["donation_status"] = "cancelled"

    if updated["appointment_status"] == "rejected" or updated["donation_status"] == "cancelled":
        updated["slot_key"] = None

    if updated != dict(appointment):
        updated["updated_at"] = now or datetime.now(timezone.utc)
    return updated
