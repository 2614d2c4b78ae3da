# quickslot/modules/schedules/repository.py
from __future__ import annotations

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.modules.schedules.models import RecurringSchedule


async def create_schedule(
    db: AsyncSession,
    *,
    doctor_id: UUID,
    name: str,
    weekdays: list[int],
    start_time: str,
    end_time: str,
    interval_minutes: int,
    is_active: bool = True,
) -> RecurringSchedule:
    schedule = RecurringSchedule(
        doctor_id=doctor_id,
        name=name,
        weekdays=weekdays,
        start_time=start_time,
        end_time=end_time,
        interval_minutes=interval_minutes,
        is_active=is_active,
    )
    db.add(schedule)
    await db.flush()
    return schedule


async def list_by_doctor(
    db: AsyncSession, *, doctor_id: UUID, active_only: bool = False
) -> Sequence[RecurringSchedule]:
    stmt = select(RecurringSchedule).where(RecurringSchedule.doctor_id == doctor_id)
    if active_only:
        stmt = stmt.where(RecurringSchedule.is_active.is_(True))
    rows = await db.execute(
        stmt.order_by(RecurringSchedule.created_at, RecurringSchedule.id)
    )
    return rows.scalars().all()


async def delete_schedule(db: AsyncSession, *, doctor_id: UUID, schedule_id: UUID) -> int:
    res = await db.execute(
        delete(RecurringSchedule).where(
            RecurringSchedule.id == schedule_id,
            RecurringSchedule.doctor_id == doctor_id,
        )
    )
    return res.rowcount or 0  # type: ignore
