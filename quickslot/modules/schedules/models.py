# quickslot/modules/schedules/models.py
from __future__ import annotations

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from quickslot.db.base import Base, ReprMixin, TimestampMixin, UUIDPKMixin

# Slot widths a schedule may use, in minutes
ALLOWED_INTERVALS = (5, 10, 15, 20, 25, 30)


class RecurringSchedule(UUIDPKMixin, TimestampMixin, ReprMixin, Base):
    """
    Weekly pattern expanded into TimeSlot rows by the slot generator.
    Never edited in place: edit = delete + recreate.
    """

    __tablename__ = "recurring_schedules"

    doctor_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("doctors.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Sorted list of ints, Sunday=0 .. Saturday=6
    weekdays: Mapped[list[int]] = mapped_column(JSON, nullable=False)

    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    interval_minutes: Mapped[int] = mapped_column(Integer, nullable=False)

    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="true"
    )

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_schedule_time_order"),
        CheckConstraint(
            "interval_minutes IN (5, 10, 15, 20, 25, 30)",
            name="ck_schedule_interval_valid",
        ),
        Index("ix_schedule_doctor_active", "doctor_id", "is_active"),
    )
