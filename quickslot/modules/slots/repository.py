# quickslot/modules/slots/repository.py
from __future__ import annotations

from datetime import date
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.modules.slots.models import TimeSlot


class SlotAlreadyExistsError(Exception):
    """(doctor, date, start_time) already has a slot."""


def bookable_conditions(doctor_id: UUID, today: date) -> list:
    return [
        TimeSlot.doctor_id == doctor_id,
        TimeSlot.is_available.is_(True),
        TimeSlot.is_booked.is_(False),
        TimeSlot.slot_date >= today,
    ]


async def create_slot(
    db: AsyncSession,
    *,
    doctor_id: UUID,
    slot_date: date,
    start_time: str,
    end_time: str,
    duration_minutes: int,
) -> TimeSlot:
    slot = TimeSlot(
        doctor_id=doctor_id,
        slot_date=slot_date,
        start_time=start_time,
        end_time=end_time,
        duration_minutes=duration_minutes,
        is_available=True,
        is_booked=False,
    )
    db.add(slot)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise SlotAlreadyExistsError("slot_exists") from exc
    return slot


async def get_for_doctor(
    db: AsyncSession, *, doctor_id: UUID, slot_id: UUID
) -> Optional[TimeSlot]:
    # populate_existing: pick up changes made by bulk UPDATEs in this transaction
    row = await db.execute(
        select(TimeSlot)
        .where(TimeSlot.id == slot_id, TimeSlot.doctor_id == doctor_id)
        .execution_options(populate_existing=True)
    )
    return row.scalar_one_or_none()


async def list_by_doctor(
    db: AsyncSession, *, doctor_id: UUID, from_date: Optional[date] = None
) -> Sequence[TimeSlot]:
    stmt = select(TimeSlot).where(TimeSlot.doctor_id == doctor_id)
    if from_date is not None:
        stmt = stmt.where(TimeSlot.slot_date >= from_date)
    rows = await db.execute(stmt.order_by(TimeSlot.slot_date, TimeSlot.start_time))
    return rows.scalars().all()


async def list_bookable(
    db: AsyncSession, *, doctor_id: UUID, today: date, until: Optional[date] = None
) -> Sequence[TimeSlot]:
    conditions = bookable_conditions(doctor_id, today)
    if until is not None:
        conditions.append(TimeSlot.slot_date <= until)
    rows = await db.execute(
        select(TimeSlot)
        .where(*conditions)
        .order_by(TimeSlot.slot_date, TimeSlot.start_time)
    )
    return rows.scalars().all()


async def count_bookable(db: AsyncSession, *, doctor_id: UUID, today: date) -> int:
    stmt = select(func.count()).select_from(TimeSlot).where(*bookable_conditions(doctor_id, today))
    return (await db.execute(stmt)).scalar_one()


async def claim_slot(
    db: AsyncSession, *, doctor_id: UUID, slot_id: UUID, today: date
) -> int:
    """
    Conditional update: flips is_booked false -> true only while the slot is
    still bookable. Returns the affected row count (0 or 1).
    """
    stmt = (
        update(TimeSlot)
        .where(TimeSlot.id == slot_id, *bookable_conditions(doctor_id, today))
        .values(is_booked=True)
        .execution_options(synchronize_session=False)
    )
    res = await db.execute(stmt)
    return res.rowcount or 0  # type: ignore


async def delete_unbooked(db: AsyncSession, *, doctor_id: UUID, slot_id: UUID) -> int:
    res = await db.execute(
        delete(TimeSlot).where(
            TimeSlot.id == slot_id,
            TimeSlot.doctor_id == doctor_id,
            TimeSlot.is_booked.is_(False),
        )
    )
    return res.rowcount or 0  # type: ignore
