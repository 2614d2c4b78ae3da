# quickslot/modules/accounts/models.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from quickslot.db.base import Base, ReprMixin, TimestampMixin, UUIDPKMixin


class User(UUIDPKMixin, TimestampMixin, ReprMixin, Base):
    """
    Authenticated principal. The practitioner profile (Doctor) shares its id.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Username chosen at sign-up; used if the profile row has to be recreated.
    requested_username: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="true"
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        CheckConstraint("email = lower(email)", name="ck_users_email_lowercase"),
    )
