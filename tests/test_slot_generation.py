"""Tests for expanding recurring schedules into slots."""

from dataclasses import dataclass
from datetime import date, timedelta

import pytest
from sqlalchemy import func, select, update

from quickslot.modules.schedules import service as schedules_svc
from quickslot.modules.schedules.schemas import ScheduleCreate
from quickslot.modules.slots.models import TimeSlot

# A Sunday, far enough ahead to stay in the future
SUNDAY = date(2030, 1, 6)


@dataclass
class Pattern:
    weekdays: list
    start_time: str
    end_time: str
    interval_minutes: int


class TestSlotRanges:
    def test_twenty_minute_morning(self):
        """09:00-10:00 every 20 minutes gives 3 ranges ending exactly at 10:00."""
        ranges = list(schedules_svc.slot_ranges("09:00", "10:00", 20))
        assert ranges == [("09:00", "09:20"), ("09:20", "09:40"), ("09:40", "10:00")]

    def test_partial_last_range_dropped(self):
        ranges = list(schedules_svc.slot_ranges("09:00", "10:10", 20))
        assert len(ranges) == 3
        assert ranges[-1] == ("09:40", "10:00")

    def test_window_shorter_than_interval(self):
        assert list(schedules_svc.slot_ranges("09:00", "09:10", 15)) == []

    def test_count_is_floor_of_window_over_interval(self):
        for interval in (5, 10, 15, 20, 25, 30):
            ranges = list(schedules_svc.slot_ranges("08:00", "12:07", interval))
            assert len(ranges) == (4 * 60 + 7) // interval


class TestPlanSlots:
    def test_only_matching_weekdays(self):
        """Monday(1) and Wednesday(3) over one week from a Sunday."""
        planned = schedules_svc.plan_slots(
            [Pattern([1, 3], "09:00", "10:00", 20)], start=SUNDAY, days_ahead=7
        )
        dates = sorted({p.slot_date for p in planned})
        assert dates == [SUNDAY + timedelta(days=1), SUNDAY + timedelta(days=3)]
        assert len(planned) == 6
        assert planned[-1].start_time == "09:40"
        assert planned[-1].end_time == "10:00"
        assert all(p.duration_minutes == 20 for p in planned)

    def test_days_ahead_window_is_exclusive(self):
        """days_ahead=1 covers only the start day."""
        planned = schedules_svc.plan_slots(
            [Pattern([0, 1, 2, 3, 4, 5, 6], "09:00", "09:30", 30)], start=SUNDAY, days_ahead=1
        )
        assert [p.slot_date for p in planned] == [SUNDAY]

    def test_overlapping_schedules_deduplicated(self):
        morning = Pattern([1], "09:00", "10:00", 30)
        overlap = Pattern([1], "09:30", "11:00", 30)
        planned = schedules_svc.plan_slots([morning, overlap], start=SUNDAY, days_ahead=2)
        starts = [p.start_time for p in planned]
        assert starts == ["09:00", "09:30", "10:00", "10:30"]

    def test_days_ahead_must_be_positive(self):
        with pytest.raises(ValueError):
            schedules_svc.plan_slots([], start=SUNDAY, days_ahead=0)


async def _add_schedule(session, doctor, **overrides):
    data = {
        "name": "Mornings",
        "weekdays": [1, 3],
        "start_time": "09:00",
        "end_time": "10:00",
        "interval_minutes": 20,
    }
    data.update(overrides)
    return await schedules_svc.create_schedule(session, doctor.id, ScheduleCreate(**data))


async def _slot_count(session, doctor):
    stmt = select(func.count()).select_from(TimeSlot).where(TimeSlot.doctor_id == doctor.id)
    return (await session.execute(stmt)).scalar_one()


class TestGenerateSlots:
    async def test_creates_expected_slots(self, session, doctor):
        await _add_schedule(session, doctor)
        created = await schedules_svc.generate_slots_from_schedules(
            session, doctor.id, 7, today=SUNDAY
        )
        await session.commit()
        assert created == 6
        assert await _slot_count(session, doctor) == 6

    async def test_second_run_creates_nothing(self, session, doctor):
        await _add_schedule(session, doctor)
        await schedules_svc.generate_slots_from_schedules(session, doctor.id, 14, today=SUNDAY)
        await session.commit()

        again = await schedules_svc.generate_slots_from_schedules(
            session, doctor.id, 14, today=SUNDAY
        )
        assert again == 0
        assert await _slot_count(session, doctor) == 12

    async def test_booked_slots_untouched(self, session, doctor):
        await _add_schedule(session, doctor)
        await schedules_svc.generate_slots_from_schedules(session, doctor.id, 7, today=SUNDAY)
        await session.execute(
            update(TimeSlot)
            .where(TimeSlot.doctor_id == doctor.id, TimeSlot.start_time == "09:00")
            .values(is_booked=True)
        )
        await session.commit()

        created = await schedules_svc.generate_slots_from_schedules(
            session, doctor.id, 7, today=SUNDAY
        )
        await session.commit()
        assert created == 0
        booked = (
            await session.execute(
                select(func.count())
                .select_from(TimeSlot)
                .where(TimeSlot.doctor_id == doctor.id, TimeSlot.is_booked.is_(True))
            )
        ).scalar_one()
        assert booked == 2

    async def test_extending_horizon_adds_only_new_days(self, session, doctor):
        await _add_schedule(session, doctor)
        await schedules_svc.generate_slots_from_schedules(session, doctor.id, 7, today=SUNDAY)
        await session.commit()
        created = await schedules_svc.generate_slots_from_schedules(
            session, doctor.id, 14, today=SUNDAY
        )
        assert created == 6

    async def test_inactive_schedules_ignored(self, session, doctor):
        await _add_schedule(session, doctor, is_active=False)
        created = await schedules_svc.generate_slots_from_schedules(
            session, doctor.id, 30, today=SUNDAY
        )
        assert created == 0

    async def test_no_schedules(self, session, doctor):
        assert await schedules_svc.generate_slots_from_schedules(
            session, doctor.id, 30, today=SUNDAY
        ) == 0

    async def test_other_doctors_slots_do_not_block(self, session, doctor):
        from tests.conftest import make_doctor

        other = await make_doctor(session, username="dr-other", email="other@example.com")
        await _add_schedule(session, other)
        await _add_schedule(session, doctor)
        await schedules_svc.generate_slots_from_schedules(session, other.id, 7, today=SUNDAY)
        created = await schedules_svc.generate_slots_from_schedules(
            session, doctor.id, 7, today=SUNDAY
        )
        assert created == 6
