# quickslot/modules/slots/schemas.py
from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from quickslot.core.times import normalize_hhmm


class SlotCreate(BaseModel):
    slot_date: date
    start_time: str = Field(..., description="HH:MM")
    end_time: str = Field(..., description="HH:MM")

    @field_validator("start_time", "end_time")
    @classmethod
    def _hhmm(cls, v: str) -> str:
        return normalize_hhmm(v)

    @model_validator(mode="after")
    def _end_after_start(self):
        if self.start_time >= self.end_time:
            raise ValueError("end_time must be after start_time")
        return self


class SlotPublic(BaseModel):
    id: UUID
    doctor_id: UUID
    slot_date: date
    start_time: str
    end_time: str
    duration_minutes: int
    is_available: bool
    is_booked: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AvailableSlot(BaseModel):
    """
    A bookable slot as listed on the public booking page.
    """
    id: UUID
    slot_date: date
    start_time: str
    end_time: str
    duration_minutes: int
    formatted_date: str
    formatted_time: str
