"""Appointment repository - Database operations for donation appointments"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import DonationAppointment, generate_id


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_booked_slots(db: Session, appointment_date: date) -> list[str]:
        """Slot labels still held on a date (rejected/cancelled ones have released theirs)"""
        rows = (
            db.query(DonationAppointment.appointment_time)
            .filter(
                DonationAppointment.appointment_date == appointment_date,
                DonationAppointment.slot_key.isnot(None),
            )
            .all()
        )
        return [row[0] for row in rows]

    @staticmethod
    def get_appointment_by_id(db: Session, appointment_id: str) -> Optional[DonationAppointment]:
        return db.query(DonationAppointment).filter(DonationAppointment.id == appointment_id).first()

    @staticmethod
    def get_appointment_for_request(db: Session, request_id: str) -> Optional[DonationAppointment]:
        return (
            db.query(DonationAppointment)
            .filter(DonationAppointment.request_id == request_id)
            .first()
        )

    @staticmethod
    def add_appointment(db: Session, payload: dict) -> DonationAppointment:
        """
        Stage an appointment and flush it so the unique slot index is checked now.
        The caller owns the transaction (commit / rollback).
        """
        appointment = DonationAppointment(id=generate_id(), **payload)
        db.add(appointment)
        db.flush()
        return appointment

    @staticmethod
    def update_appointment(db: Session, appointment: DonationAppointment, **updates) -> DonationAppointment:
        for key, value in updates.items():
            if hasattr(appointment, key):
                setattr(appointment, key, value)
        db.commit()
        db.refresh(appointment)
        return appointment
