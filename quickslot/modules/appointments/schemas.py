# quickslot/modules/appointments/schemas.py
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator


class AppointmentStatus(str, Enum):
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"
    no_show = "no_show"


PatientNameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=120)]
PatientPhoneStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=32)]


class BookingRequest(BaseModel):
    """
    Public booking form. Email may be left empty.
    """
    slot_id: UUID
    patient_name: PatientNameStr
    patient_phone: PatientPhoneStr
    patient_email: Optional[EmailStr] = None
    patient_notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("patient_email", mode="before")
    @classmethod
    def _empty_email_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("patient_notes")
    @classmethod
    def _empty_notes_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class BookingConfirmation(BaseModel):
    id: UUID
    slot_id: UUID
    status: AppointmentStatus
    patient_name: str
    patient_phone: str
    patient_email: Optional[str] = None
    appointment_date: date
    appointment_time: str
    doctor_name: Optional[str] = None
    doctor_specialty: Optional[str] = None
    formatted_date: str
    formatted_time: str


class StatusUpdateRequest(BaseModel):
    status: Literal["completed", "no_show", "cancelled"]
    doctor_notes: Optional[str] = Field(default=None, max_length=2000)


class SlotTimes(BaseModel):
    slot_date: date
    start_time: str
    end_time: str

    class Config:
        from_attributes = True


class AppointmentPublic(BaseModel):
    id: UUID
    slot_id: UUID
    doctor_id: UUID
    patient_name: str
    patient_phone: str
    patient_email: Optional[str] = None
    patient_notes: Optional[str] = None
    appointment_date: date
    appointment_time: str
    status: AppointmentStatus
    doctor_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    time_slot: Optional[SlotTimes] = None

    class Config:
        from_attributes = True


class AppointmentListPage(BaseModel):
    items: List[AppointmentPublic]
    total: int
    limit: int
    offset: int
    has_next: bool
