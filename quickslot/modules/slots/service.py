# quickslot/modules/slots/service.py
from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.core import times
from quickslot.core.config import settings
from quickslot.modules.slots import repository as slots_repo
from quickslot.modules.slots.models import TimeSlot
from quickslot.modules.slots.schemas import AvailableSlot, SlotCreate, SlotPublic


class SlotNotFound(Exception):
    pass


class SlotExists(Exception):
    pass


class SlotBooked(Exception):
    """A booked slot cannot be deleted."""


class SlotInPast(Exception):
    pass


def to_available(slot: TimeSlot) -> AvailableSlot:
    return AvailableSlot(
        id=slot.id,
        slot_date=slot.slot_date,
        start_time=slot.start_time,
        end_time=slot.end_time,
        duration_minutes=slot.duration_minutes,
        formatted_date=times.format_long_date(slot.slot_date),
        formatted_time=f"{slot.start_time} - {slot.end_time}",
    )


async def add_slot(
    session: AsyncSession,
    doctor_id: UUID,
    payload: SlotCreate,
    *,
    today: Optional[date] = None,
) -> SlotPublic:
    """
    Ad-hoc single slot.
    """
    if payload.slot_date < (today or times.today()):
        raise SlotInPast("slot_in_past")
    duration = times.to_minutes(payload.end_time) - times.to_minutes(payload.start_time)
    try:
        slot = await slots_repo.create_slot(
            session,
            doctor_id=doctor_id,
            slot_date=payload.slot_date,
            start_time=payload.start_time,
            end_time=payload.end_time,
            duration_minutes=duration,
        )
    except slots_repo.SlotAlreadyExistsError as exc:
        raise SlotExists("slot_exists") from exc
    return SlotPublic.model_validate(slot)


async def list_doctor_slots(
    session: AsyncSession,
    doctor_id: UUID,
    *,
    upcoming_only: bool = False,
    today: Optional[date] = None,
) -> List[SlotPublic]:
    from_date = (today or times.today()) if upcoming_only else None
    rows = await slots_repo.list_by_doctor(session, doctor_id=doctor_id, from_date=from_date)
    return [SlotPublic.model_validate(s) for s in rows]


async def delete_slot(session: AsyncSession, doctor_id: UUID, slot_id: UUID) -> None:
    """
    Booked slots are kept: the appointment must stay attached to its slot.
    """
    deleted = await slots_repo.delete_unbooked(session, doctor_id=doctor_id, slot_id=slot_id)
    if deleted:
        return
    slot = await slots_repo.get_for_doctor(session, doctor_id=doctor_id, slot_id=slot_id)
    if slot is None:
        raise SlotNotFound("slot_not_found")
    raise SlotBooked("slot_booked")


async def list_available_slots(
    session: AsyncSession,
    doctor_id: UUID,
    *,
    today: Optional[date] = None,
    window_days: Optional[int] = None,
) -> List[AvailableSlot]:
    """
    Bookable slots between today and today + window, by date then start time.
    """
    start = today or times.today()
    window = settings.BOOKING_WINDOW_DAYS if window_days is None else window_days
    rows = await slots_repo.list_bookable(
        session,
        doctor_id=doctor_id,
        today=start,
        until=start + timedelta(days=window),
    )
    return [to_available(s) for s in rows]
