# quickslot/modules/dashboard/schemas.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from quickslot.modules.appointments.schemas import AppointmentPublic


class DashboardStats(BaseModel):
    today_appointments: int
    this_week_appointments: int
    available_slots: int


class DashboardSummary(BaseModel):
    full_name: Optional[str] = None
    username: str
    booking_link: str
    stats: DashboardStats
    recent_appointments: List[AppointmentPublic]
