# quickslot/modules/doctors/models.py
from __future__ import annotations

import datetime as dt
import uuid
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from quickslot.db.base import Base, ReprMixin, TimestampMixin, utcnow


class DoctorTier(PyEnum):
    FREE = "free"
    BASIC = "basic"
    PRO = "pro"


class Doctor(TimestampMixin, ReprMixin, Base):
    """
    Practitioner profile, 1:1 with users.id. Owns schedules, slots and
    appointments; reachable publicly through its username.
    """

    __tablename__ = "doctors"

    id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False, default="")
    username: Mapped[str] = mapped_column(String(30), nullable=False)

    full_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    specialty: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    tier: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=DoctorTier.FREE.value,
        server_default=DoctorTier.FREE.value,
    )
    subscription_start: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    subscription_end: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)

    profile_completed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )

    __table_args__ = (
        UniqueConstraint("username", name="uq_doctors_username"),
        CheckConstraint("tier IN ('free', 'basic', 'pro')", name="ck_doctors_tier_valid"),
    )


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    action: Mapped[str] = mapped_column(String(120), nullable=False)
    details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    timestamp: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (Index("ix_audit_logs_timestamp", "timestamp"),)
