# quickslot/modules/schedules/service.py
"""
Recurring schedules and their expansion into concrete time slots.

generate_slots_from_schedules(doctor_id, days_ahead) walks every date in
[today, today + days_ahead), and for each active schedule whose weekdays hold
that date's weekday (Sunday=0) emits [t, t + interval) ranges from start_time,
dropping a trailing partial range that would pass end_time. A slot that
already exists for (doctor, date, start_time), booked or not, is left alone,
so the call can be repeated over overlapping horizons. It returns the number
of slots it created; no active schedule simply means 0.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Iterator, List, Optional, Protocol, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.core import times
from quickslot.modules.log import write_audit_log
from quickslot.modules.schedules import repository as schedules_repo
from quickslot.modules.schedules.schemas import ScheduleCreate, SchedulePublic
from quickslot.modules.slots.models import TimeSlot

logger = logging.getLogger(__name__)


class ScheduleNotFound(Exception):
    pass


class SlotGenerationConflict(Exception):
    """Another generation run inserted the same slots concurrently."""


class _SchedulePattern(Protocol):
    weekdays: Sequence[int]
    start_time: str
    end_time: str
    interval_minutes: int


@dataclass(frozen=True)
class PlannedSlot:
    slot_date: date
    start_time: str
    end_time: str
    duration_minutes: int


def slot_ranges(start_time: str, end_time: str, interval_minutes: int) -> Iterator[tuple[str, str]]:
    """
    [t, t + interval) for t from start_time, while the range fits before end_time.
    """
    if interval_minutes <= 0:
        raise ValueError("interval_minutes must be positive")
    start = times.to_minutes(start_time)
    end = times.to_minutes(end_time)
    t = start
    while t + interval_minutes <= end:
        yield times.from_minutes(t), times.from_minutes(t + interval_minutes)
        t += interval_minutes


def plan_slots(
    schedules: Iterable[_SchedulePattern],
    *,
    start: date,
    days_ahead: int,
) -> List[PlannedSlot]:
    """
    Expand schedules over [start, start + days_ahead). Ranges that two
    schedules share on the same date (same start_time) appear once.
    """
    if days_ahead < 1:
        raise ValueError("days_ahead must be >= 1")
    schedules = list(schedules)
    planned: List[PlannedSlot] = []
    seen: set[tuple[date, str]] = set()
    for offset in range(days_ahead):
        day = start + timedelta(days=offset)
        weekday = times.weekday_sun0(day)
        for schedule in schedules:
            if weekday not in schedule.weekdays:
                continue
            for slot_start, slot_end in slot_ranges(
                schedule.start_time, schedule.end_time, schedule.interval_minutes
            ):
                key = (day, slot_start)
                if key in seen:
                    continue
                seen.add(key)
                planned.append(
                    PlannedSlot(
                        slot_date=day,
                        start_time=slot_start,
                        end_time=slot_end,
                        duration_minutes=schedule.interval_minutes,
                    )
                )
    return planned


async def generate_slots_from_schedules(
    session: AsyncSession,
    doctor_id: UUID,
    days_ahead: int,
    *,
    today: Optional[date] = None,
) -> int:
    """
    Create missing slots for the doctor's active schedules; returns how many
    were created. Runs in the caller's transaction.
    """
    start = today or times.today()
    schedules = await schedules_repo.list_by_doctor(
        session, doctor_id=doctor_id, active_only=True
    )
    if not schedules:
        return 0

    planned = plan_slots(schedules, start=start, days_ahead=days_ahead)
    if not planned:
        return 0

    last = start + timedelta(days=days_ahead - 1)
    rows = await session.execute(
        select(TimeSlot.slot_date, TimeSlot.start_time).where(
            TimeSlot.doctor_id == doctor_id,
            TimeSlot.slot_date >= start,
            TimeSlot.slot_date <= last,
        )
    )
    existing = {(r.slot_date, r.start_time) for r in rows}

    new_slots = [
        TimeSlot(
            doctor_id=doctor_id,
            slot_date=p.slot_date,
            start_time=p.start_time,
            end_time=p.end_time,
            duration_minutes=p.duration_minutes,
            is_available=True,
            is_booked=False,
        )
        for p in planned
        if (p.slot_date, p.start_time) not in existing
    ]
    if not new_slots:
        return 0

    session.add_all(new_slots)
    try:
        await session.flush()
    except IntegrityError as exc:
        raise SlotGenerationConflict("slot_generation_conflict") from exc

    await write_audit_log(
        session,
        doctor_id,
        "GENERATE_SLOTS",
        f"days_ahead={days_ahead} created={len(new_slots)}",
    )
    logger.info(
        "generated %d slots for doctor %s over %d days", len(new_slots), doctor_id, days_ahead
    )
    return len(new_slots)


# CRUD

async def create_schedule(
    session: AsyncSession, doctor_id: UUID, payload: ScheduleCreate
) -> SchedulePublic:
    schedule = await schedules_repo.create_schedule(
        session,
        doctor_id=doctor_id,
        name=payload.name,
        weekdays=payload.weekdays,
        start_time=payload.start_time,
        end_time=payload.end_time,
        interval_minutes=payload.interval_minutes,
        is_active=payload.is_active,
    )
    return SchedulePublic.model_validate(schedule)


async def list_schedules(session: AsyncSession, doctor_id: UUID) -> List[SchedulePublic]:
    rows = await schedules_repo.list_by_doctor(session, doctor_id=doctor_id)
    return [SchedulePublic.model_validate(s) for s in rows]


async def delete_schedule(session: AsyncSession, doctor_id: UUID, schedule_id: UUID) -> None:
    """
    Slots generated earlier stay; they are independent rows.
    """
    deleted = await schedules_repo.delete_schedule(
        session, doctor_id=doctor_id, schedule_id=schedule_id
    )
    if not deleted:
        raise ScheduleNotFound("schedule_not_found")
