# quickslot/modules/dashboard/service.py
from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.core import times
from quickslot.modules.appointments.models import Appointment, ApptStatus
from quickslot.modules.appointments.schemas import AppointmentPublic
from quickslot.modules.dashboard.schemas import DashboardStats, DashboardSummary
from quickslot.modules.doctors.models import Doctor
from quickslot.modules.doctors.service import booking_link
from quickslot.modules.slots import repository as slots_repo

RECENT_LIMIT = 5


async def _count_confirmed(session: AsyncSession, doctor_id, *conditions) -> int:
    stmt = (
        select(func.count())
        .select_from(Appointment)
        .where(
            Appointment.doctor_id == doctor_id,
            Appointment.status == ApptStatus.CONFIRMED.value,
            *conditions,
        )
    )
    return (await session.execute(stmt)).scalar_one()


async def get_summary(
    session: AsyncSession, doctor: Doctor, *, today: Optional[date] = None
) -> DashboardSummary:
    """
    Confirmed appointments today and since Sunday, bookable future slots,
    and the latest confirmed bookings.
    """
    today = today or times.today()
    week_start = times.start_of_week(today)

    today_count = await _count_confirmed(
        session, doctor.id, Appointment.appointment_date == today
    )
    week_count = await _count_confirmed(
        session, doctor.id, Appointment.appointment_date >= week_start
    )
    available = await slots_repo.count_bookable(session, doctor_id=doctor.id, today=today)

    recent = (
        await session.execute(
            select(Appointment)
            .where(
                Appointment.doctor_id == doctor.id,
                Appointment.status == ApptStatus.CONFIRMED.value,
            )
            .order_by(Appointment.created_at.desc(), Appointment.id)
            .limit(RECENT_LIMIT)
        )
    ).scalars().all()

    return DashboardSummary(
        full_name=doctor.full_name,
        username=doctor.username,
        booking_link=booking_link(doctor.username),
        stats=DashboardStats(
            today_appointments=today_count,
            this_week_appointments=week_count,
            available_slots=available,
        ),
        recent_appointments=[AppointmentPublic.model_validate(a) for a in recent],
    )
