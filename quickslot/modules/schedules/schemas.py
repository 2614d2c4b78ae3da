# quickslot/modules/schedules/schemas.py
from __future__ import annotations

from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from quickslot.core.config import settings
from quickslot.core.times import normalize_hhmm
from quickslot.modules.schedules.models import ALLOWED_INTERVALS


class ScheduleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    weekdays: List[int] = Field(..., min_length=1, description="Sunday=0 .. Saturday=6")
    start_time: str = Field(..., description="HH:MM")
    end_time: str = Field(..., description="HH:MM")
    interval_minutes: int = Field(default=15)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v

    @field_validator("weekdays")
    @classmethod
    def _valid_weekdays(cls, v: List[int]) -> List[int]:
        if any(d < 0 or d > 6 for d in v):
            raise ValueError("weekdays must be between 0 (Sunday) and 6 (Saturday)")
        return sorted(set(v))

    @field_validator("start_time", "end_time")
    @classmethod
    def _hhmm(cls, v: str) -> str:
        return normalize_hhmm(v)

    @field_validator("interval_minutes")
    @classmethod
    def _allowed_interval(cls, v: int) -> int:
        if v not in ALLOWED_INTERVALS:
            raise ValueError(f"interval_minutes must be one of {list(ALLOWED_INTERVALS)}")
        return v

    @model_validator(mode="after")
    def _end_after_start(self):
        if self.start_time >= self.end_time:
            raise ValueError("end_time must be after start_time")
        return self


class SchedulePublic(BaseModel):
    id: UUID
    doctor_id: UUID
    name: str
    weekdays: List[int]
    start_time: str
    end_time: str
    interval_minutes: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class GenerateSlotsRequest(BaseModel):
    days_ahead: int = Field(default=30, ge=1)

    @field_validator("days_ahead")
    @classmethod
    def _within_horizon(cls, v: int) -> int:
        if v > settings.MAX_GENERATION_DAYS:
            raise ValueError(f"days_ahead must be at most {settings.MAX_GENERATION_DAYS}")
        return v


class GenerateSlotsResult(BaseModel):
    days_ahead: int
    created: int
