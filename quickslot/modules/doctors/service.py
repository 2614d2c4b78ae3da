# quickslot/modules/doctors/service.py
from __future__ import annotations

import logging
import re

from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.core.config import settings
from quickslot.modules.accounts.models import User
from quickslot.modules.doctors import repository as doctors_repo
from quickslot.modules.doctors.models import Doctor
from quickslot.modules.doctors.schemas import DoctorPublic, ProfileUpdateRequest, Tier
from quickslot.modules.log import write_audit_log

logger = logging.getLogger(__name__)


class DoctorNotFound(Exception):
    pass


def booking_link(username: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/{username}"


def to_public(doctor: Doctor) -> DoctorPublic:
    return DoctorPublic(
        id=doctor.id,
        email=doctor.email,
        username=doctor.username,
        full_name=doctor.full_name,
        specialty=doctor.specialty,
        phone=doctor.phone,
        bio=doctor.bio,
        tier=Tier(doctor.tier),
        subscription_start=doctor.subscription_start,
        subscription_end=doctor.subscription_end,
        profile_completed=doctor.profile_completed,
        booking_link=booking_link(doctor.username),
        created_at=doctor.created_at,
        updated_at=doctor.updated_at,
    )


def derive_username(user: User) -> str:
    """
    Default username for a principal without a profile:
    the one requested at sign-up, else the email local part, else user-<id>.
    """
    if user.requested_username:
        return user.requested_username
    local = (user.email or "").split("@")[0].lower()
    candidate = re.sub(r"[^a-z0-9]", "-", local)[:30]
    if len(candidate) >= 3:
        return candidate
    return f"user-{user.id.hex[:8]}"


async def _free_username(session: AsyncSession, user: User) -> str:
    base = derive_username(user)
    if not await doctors_repo.username_exists(session, base):
        return base
    # Append part of the (unique) user id until free
    for width in (4, 8, 12):
        candidate = f"{base[:30 - width - 1]}-{user.id.hex[:width]}"
        if not await doctors_repo.username_exists(session, candidate):
            return candidate
    return f"user-{user.id.hex[:25]}"


async def ensure_doctor_profile(session: AsyncSession, user: User) -> Doctor:
    """
    Idempotent: return the doctor row of this principal, creating it with a
    derived username and profile_completed=False when missing.

    Must run before any other write of the transaction: when a concurrent
    request creates the row first, the transaction is rolled back and the
    winner's row is returned. `user` is expired afterwards.
    """
    user_id = user.id
    doctor = await doctors_repo.get_by_id(session, user_id)
    if doctor is not None:
        return doctor

    username = await _free_username(session, user)
    try:
        doctor = await doctors_repo.create_doctor(
            session,
            doctor_id=user_id,
            email=user.email,
            username=username,
        )
    except doctors_repo.DoctorAlreadyExistsError:
        await session.rollback()
        doctor = await doctors_repo.get_by_id(session, user_id)
        if doctor is None:
            raise
        logger.info("doctor profile for user %s was created concurrently", user_id)
        return doctor

    await write_audit_log(session, user_id, "PROFILE_CREATED", f"username={username}")
    logger.info("created missing doctor profile %s for user %s", username, user_id)
    return doctor


async def update_profile(
    session: AsyncSession, doctor: Doctor, payload: ProfileUpdateRequest
) -> DoctorPublic:
    """
    Save the profile form; a saved profile is a completed profile.
    """
    first_completion = not doctor.profile_completed
    await doctors_repo.update_profile(
        session,
        doctor,
        full_name=payload.full_name,
        specialty=payload.specialty,
        phone=payload.phone,
        bio=payload.bio or None,
    )
    await write_audit_log(
        session,
        doctor.id,
        "PROFILE_UPDATED",
        "first completion" if first_completion else None,
    )
    return to_public(doctor)


async def get_doctor_by_username(session: AsyncSession, username: str) -> Doctor:
    doctor = await doctors_repo.get_by_username(session, username)
    if doctor is None:
        raise DoctorNotFound("doctor_not_found")
    return doctor
