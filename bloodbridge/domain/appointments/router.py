"""Appointment router - FastAPI endpoints for slot availability and booking"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_uid
from ...database import get_db
from .schemas import AppointmentResponse, BookAppointmentRequest, SlotsResponse
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


@router.get("/slots", response_model=SlotsResponse)
async def get_free_slots(
    appointment_date: date = Query(..., alias="date"),
    _: str = Depends(get_current_uid),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Free slots for a date; re-query after a SlotUnavailable error"""
    slots = service.get_free_slots(appointment_date)
    return SlotsResponse(date=appointment_date, slots=slots, available=bool(slots))


@router.post("", response_model=AppointmentResponse, status_code=201)
async def book_slot(
    data: BookAppointmentRequest,
    user_id: str = Depends(get_current_uid),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Book a slot for one of the user's donor posts"""
    return service.book(data.request_id, user_id, data.appointment_date, data.appointment_time)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: str,
    user_id: str = Depends(get_current_uid),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.get_appointment(appointment_id, user_id)
