"""Appointment domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class BookAppointmentRequest(BaseModel):
    """Schema for booking a slot for an existing donor post"""

    request_id: str
    appointment_date: date
    appointment_time: str

    @field_validator("appointment_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("appointment_time is required")
        return v


class SlotsResponse(BaseModel):
    date: date
    slots: list[str]
    # False tells the client to show the "no slots for this date" state
    available: bool


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    request_id: str
    user_id: str
    appointment_date: date
    appointment_time: str
    blood_bank_location: Optional[str] = None
    appointment_status: str
    donation_status: str
    created_at: datetime
    updated_at: datetime


def appointment_to_document(appointment) -> dict:
    return {
        "id": appointment.id,
        "request_id": appointment.request_id,
        "user_id": appointment.user_id,
        "appointment_date": appointment.appointment_date,
        "appointment_time": appointment.appointment_time,
        "slot_key": appointment.slot_key,
        "blood_bank_location": appointment.blood_bank_location,
        "appointment_status": appointment.appointment_status,
        "donation_status": appointment.donation_status,
        "created_at": appointment.created_at,
        "updated_at": appointment.updated_at,
    }
