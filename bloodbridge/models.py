import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_id():
    """Generate an opaque document id"""
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(128), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)  # From the phone-OTP sign in
    email = Column(String(255), nullable=True)
    blood_group = Column(String(3), nullable=True)
    is_available_to_donate = Column(Boolean, default=True, nullable=False)
    # List of {"date": "YYYY-MM-DD", "place": "..."} entries recorded by blood banks
    donation_history = Column(JSON, default=list, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class BloodRequest(Base):
    """A "need blood" (receiver) or "can donate" (donor) post"""

    __tablename__ = "requests"

    id = Column(String(36), primary_key=True, default=generate_id)
    type = Column(String(16), nullable=False, index=True)  # receiver, donor
    user_id = Column(String(128), nullable=False, index=True)  # Firebase UID of the owner

    name = Column(String(255), nullable=False)
    gender = Column(String(20), nullable=True)
    blood_group = Column(String(3), nullable=False, index=True)
    phone = Column(String(20), nullable=False)
    whatsapp = Column(String(20), nullable=True)
    location = Column(String(500), nullable=True)  # Display string, used by feed search
    location_structured = Column(JSON, nullable=True)
    description = Column(Text, nullable=True)

    # Receiver-only group
    purpose = Column(String(255), nullable=True)
    urgency = Column(String(16), nullable=True)  # normal, soon, urgent, critical
    patient_details = Column(Text, nullable=True)
    disease = Column(String(255), nullable=True)

    # Donor-only group
    prev_donation_date = Column(Date, nullable=True)
    available_to_donate = Column(Boolean, nullable=True)
    medical_history = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    appointment = relationship(
        "DonationAppointment",
        back_populates="request",
        uselist=False,
        cascade="all, delete-orphan",
    )


class DonationAppointment(Base):
    __tablename__ = "donation_appointments"

    id = Column(String(36), primary_key=True, default=generate_id)
    request_id = Column(String(36), ForeignKey("requests.id"), nullable=False, unique=True)
    user_id = Column(String(128), nullable=False, index=True)
    appointment_date = Column(Date, nullable=False, index=True)
    appointment_time = Column(String(32), nullable=False)
    # "<date>|<time>" while the appointment holds its slot, NULL once rejected/cancelled.
    # The unique index is what stops two bookings of the same slot.
    slot_key = Column(String(64), unique=True, nullable=True)
    blood_bank_location = Column(String(255), nullable=True)

    # Status workflow (set by blood bank reviewers):
    # appointment_status: pending_approval → approved | rejected
    # donation_status: pending → completed | cancelled
    appointment_status = Column(String(32), default="pending_approval", nullable=False)
    donation_status = Column(String(32), default="pending", nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    request = relationship("BloodRequest", back_populates="appointment")


class CampRequest(Base):
    """An organizer's request to host a donation camp"""

    __tablename__ = "camp_requests"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(128), nullable=False, index=True)
    organization_name = Column(String(255), nullable=False)
    contact_person = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    proposed_date = Column(Date, nullable=False)
    venue_address = Column(Text, nullable=False)
    expected_donors = Column(Integer, nullable=False)
    facilities = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    # pending → confirmed | rejected, never reverses
    status = Column(String(16), default="pending", nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)
