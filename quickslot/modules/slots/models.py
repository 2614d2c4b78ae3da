# quickslot/modules/slots/models.py
from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from quickslot.db.base import Base, ReprMixin, TimestampMixin, UUIDPKMixin


class TimeSlot(UUIDPKMixin, TimestampMixin, ReprMixin, Base):
    """
    One bookable time range of a doctor. One row = one slot.

    Bookable iff is_available and not is_booked and slot_date >= today.
    """

    __tablename__ = "time_slots"

    doctor_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("doctors.id", ondelete="CASCADE"),
        nullable=False,
    )

    slot_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)

    is_available: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="true"
    )
    is_booked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_slot_time_order"),
        CheckConstraint("duration_minutes > 0", name="ck_slot_duration_positive"),
        # Generation idempotence: one slot per doctor, day and start time
        UniqueConstraint(
            "doctor_id", "slot_date", "start_time",
            name="uq_slot_doctor_day_start",
        ),
        Index("ix_slot_doctor_date_booked", "doctor_id", "slot_date", "is_booked"),
    )
