"""User profile schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.validators import clean_text, normalize_blood_group


class DonationRecord(BaseModel):
    date: Optional[str] = None
    place: Optional[str] = None


class UserProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    firebase_uid: str
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    blood_group: Optional[str] = None
    is_available_to_donate: bool = True
    donation_history: list[DonationRecord] = []
    created_at: Optional[datetime] = None

    @field_validator("donation_history", mode="before")
    @classmethod
    def default_history(cls, v):
        return v or []


class UserProfileUpdate(BaseModel):
    """Fields the owner can edit from the profile screen"""

    name: Optional[str] = None
    email: Optional[str] = None
    blood_group: Optional[str] = None
    is_available_to_donate: Optional[bool] = None

    @field_validator("name", "email")
    @classmethod
    def trim(cls, v):
        return clean_text(v)

    @field_validator("blood_group")
    @classmethod
    def validate_blood_group(cls, v):
        return normalize_blood_group(v)
