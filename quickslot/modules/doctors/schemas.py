# quickslot/modules/doctors/schemas.py
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, StringConstraints

from quickslot.modules.slots.schemas import AvailableSlot


class Tier(str, Enum):
    free = "free"
    basic = "basic"
    pro = "pro"


NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=120)]
PhoneStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=32)]


class DoctorPublic(BaseModel):
    """
    The practitioner's own view of their profile.
    """
    id: UUID
    email: str
    username: str
    full_name: Optional[str] = None
    specialty: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    tier: Tier
    subscription_start: Optional[date] = None
    subscription_end: Optional[date] = None
    profile_completed: bool
    booking_link: str
    created_at: datetime
    updated_at: datetime


class DoctorCard(BaseModel):
    """
    What patients see on the public booking page.
    """
    username: str
    full_name: Optional[str] = None
    specialty: Optional[str] = None
    bio: Optional[str] = None

    class Config:
        from_attributes = True


class ProfileUpdateRequest(BaseModel):
    full_name: NameStr
    specialty: NameStr
    phone: PhoneStr
    bio: Optional[str] = Field(default=None, max_length=500)


class BookingPage(BaseModel):
    doctor: DoctorCard
    slots: List[AvailableSlot]
