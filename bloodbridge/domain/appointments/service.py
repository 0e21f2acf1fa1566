"""Appointment service - Business logic for slot booking and review"""

import logging
from datetime import date
from typing import Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...config import BLOOD_BANK_LOCATION, DAILY_SLOTS
from ...errors import BloodBridgeError, NotFound, SlotUnavailable
from ...models import BloodRequest, DonationAppointment
from .lifecycle import book_appointment, transition_appointment
from .repository import AppointmentRepository
from .schemas import appointment_to_document
from .slots import free_slots

logger = logging.getLogger(__name__)


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(
        self,
        db: Session,
        all_slots: Sequence[str] = DAILY_SLOTS,
        blood_bank_location: str = BLOOD_BANK_LOCATION,
    ):
        self.db = db
        self.repo = AppointmentRepository()
        self.all_slots = list(all_slots)
        self.blood_bank_location = blood_bank_location

    def get_free_slots(self, appointment_date: date) -> list[str]:
        """Re-read the committed bookings for a date and compute what is left"""
        booked = self.repo.get_booked_slots(self.db, appointment_date)
        return free_slots(self.all_slots, booked)

    def stage_booking(
        self, request_id: str, user_id: str, appointment_date: date, appointment_time: str
    ) -> DonationAppointment:
        """
        Add the appointment to the current transaction without committing.
        A slot taken between our read and the flush surfaces as SlotUnavailable.
        """
        booked = self.repo.get_booked_slots(self.db, appointment_date)
        payload = book_appointment(
            request_id,
            user_id,
            appointment_date,
            appointment_time,
            booked,
            all_slots=self.all_slots,
            blood_bank_location=self.blood_bank_location,
        )
        try:
            return self.repo.add_appointment(self.db, payload)
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(
                f"⚠️ Lost booking race for {appointment_time} on {appointment_date} (request {request_id})"
            )
            raise SlotUnavailable(appointment_date, appointment_time) from e

    def book(
        self, request_id: str, user_id: str, appointment_date: date, appointment_time: str
    ) -> DonationAppointment:
        """Book a slot for a donor post that does not have an appointment yet"""
        request = self.db.query(BloodRequest).filter(BloodRequest.id == request_id).first()
        if not request or request.user_id != user_id:
            raise NotFound("Request not found")
        if request.type != "donor":
            raise BloodBridgeError("Only donor posts can book a donation appointment")
        if self.repo.get_appointment_for_request(self.db, request_id):
            raise BloodBridgeError("This post already has an appointment")

        try:
            appointment = self.stage_booking(request_id, user_id, appointment_date, appointment_time)
            self.db.commit()
        except SlotUnavailable:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            raise SlotUnavailable(appointment_date, appointment_time) from e

        self.db.refresh(appointment)
        logger.info(
            f"✅ Appointment {appointment.id} booked for {appointment_time} on {appointment_date}"
        )
        return appointment

    def get_appointment(self, appointment_id: str, user_id: str) -> DonationAppointment:
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id)
        if not appointment or appointment.user_id != user_id:
            raise NotFound("Appointment not found")
        return appointment

    def review(
        self,
        appointment_id: str,
        appointment_status: Optional[str] = None,
        donation_status: Optional[str] = None,
    ) -> DonationAppointment:
        """Apply a blood bank reviewer's decision"""
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id)
        if not appointment:
            raise NotFound("Appointment not found")

        current = appointment_to_document(appointment)
        updated = transition_appointment(current, appointment_status, donation_status)
        changes = {k: v for k, v in updated.items() if current.get(k) != v}
        if not changes:
            return appointment

        appointment = self.repo.update_appointment(self.db, appointment, **changes)
        logger.info(
            f"✅ Appointment {appointment.id} now {appointment.appointment_status}/{appointment.donation_status}"
        )
        return appointment
