# quickslot/modules/appointments/models.py
from __future__ import annotations

import uuid
from datetime import date
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quickslot.db.base import Base, ReprMixin, TimestampMixin, UUIDPKMixin
from quickslot.modules.slots.models import TimeSlot


class ApptStatus(PyEnum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"


# Only forward moves out of "confirmed"; terminal states have no exits.
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    ApptStatus.CONFIRMED.value: frozenset(
        {
            ApptStatus.COMPLETED.value,
            ApptStatus.NO_SHOW.value,
            ApptStatus.CANCELLED.value,
        }
    ),
    ApptStatus.COMPLETED.value: frozenset(),
    ApptStatus.NO_SHOW.value: frozenset(),
    ApptStatus.CANCELLED.value: frozenset(),
}


class Appointment(UUIDPKMixin, TimestampMixin, ReprMixin, Base):
    """
    A patient's claim on exactly one TimeSlot.
    """

    __tablename__ = "appointments"

    slot_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("time_slots.id", ondelete="RESTRICT"),
        nullable=False,
    )
    # Denormalized for per-doctor queries
    doctor_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("doctors.id", ondelete="CASCADE"),
        nullable=False,
    )

    patient_name: Mapped[str] = mapped_column(String(120), nullable=False)
    patient_phone: Mapped[str] = mapped_column(String(32), nullable=False)
    patient_email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    patient_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    appointment_date: Mapped[date] = mapped_column(Date, nullable=False)
    appointment_time: Mapped[str] = mapped_column(String(5), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ApptStatus.CONFIRMED.value,
        server_default=ApptStatus.CONFIRMED.value,
    )
    doctor_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    time_slot: Mapped[TimeSlot] = relationship(
        "TimeSlot",
        foreign_keys=[slot_id],
        lazy="joined",
    )

    __table_args__ = (
        # The booking race is decided here: one appointment per slot
        UniqueConstraint("slot_id", name="uq_appt_slot"),
        CheckConstraint(
            "status IN ('confirmed', 'cancelled', 'completed', 'no_show')",
            name="ck_appt_status_valid",
        ),
        Index("ix_appt_doctor_date", "doctor_id", "appointment_date"),
        Index("ix_appt_doctor_created", "doctor_id", "created_at"),
    )
