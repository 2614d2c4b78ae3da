# quickslot/modules/doctors/repository.py
from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.modules.doctors.models import Doctor, DoctorTier


class DoctorAlreadyExistsError(Exception):
    """The doctor id or the username is already taken."""


async def get_by_id(db: AsyncSession, doctor_id: UUID) -> Optional[Doctor]:
    return await db.get(Doctor, doctor_id)


async def get_by_username(db: AsyncSession, username: str) -> Optional[Doctor]:
    row = await db.execute(
        select(Doctor).where(Doctor.username == username.strip().lower())
    )
    return row.scalar_one_or_none()


async def username_exists(db: AsyncSession, username: str) -> bool:
    row = await db.execute(
        select(Doctor.id).where(Doctor.username == username.strip().lower())
    )
    return row.first() is not None


async def create_doctor(
    db: AsyncSession,
    *,
    doctor_id: UUID,
    email: str,
    username: str,
) -> Doctor:
    doctor = Doctor(
        id=doctor_id,
        email=email,
        username=username,
        tier=DoctorTier.FREE.value,
        profile_completed=False,
    )
    db.add(doctor)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise DoctorAlreadyExistsError("doctor_exists") from exc
    return doctor


async def update_profile(
    db: AsyncSession,
    doctor: Doctor,
    *,
    full_name: str,
    specialty: str,
    phone: str,
    bio: Optional[str],
) -> Doctor:
    doctor.full_name = full_name
    doctor.specialty = specialty
    doctor.phone = phone
    doctor.bio = bio
    doctor.profile_completed = True
    await db.flush()
    return doctor
