# quickslot/modules/accounts/service.py
from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.core.config import settings
from quickslot.core.security import (
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
)
from quickslot.modules.accounts import repository as users_repo
from quickslot.modules.accounts.schemas import LoginRequest, LoginResponse, RegisterRequest
from quickslot.modules.doctors import repository as doctors_repo
from quickslot.modules.doctors.models import Doctor
from quickslot.modules.doctors.schemas import DoctorPublic
from quickslot.modules.doctors.service import ensure_doctor_profile, to_public
from quickslot.modules.log import write_audit_log

logger = logging.getLogger(__name__)


# Service-level errors (map them to HTTP in the router)
class EmailAlreadyExists(Exception):
    pass


class UsernameTaken(Exception):
    pass


class InvalidCredentials(Exception):
    pass


async def is_username_available(session: AsyncSession, username: str) -> bool:
    return not await doctors_repo.username_exists(session, username)


async def register_doctor(session: AsyncSession, payload: RegisterRequest) -> DoctorPublic:
    """
    Sign-up flow:
      1) Reject a taken username before any row is written.
      2) Reject a taken email.
      3) Insert the principal and its doctor profile in the same transaction,
         so a failure on the second insert rolls back the first.
    """
    if await doctors_repo.username_exists(session, payload.username):
        raise UsernameTaken("username_taken")

    if await users_repo.get_by_email(session, payload.email):
        raise EmailAlreadyExists("email_already_exists")

    try:
        user = await users_repo.create_user(
            session,
            email=payload.email,
            password_hash=hash_password(payload.password.get_secret_value()),
            requested_username=payload.username,
        )
    except users_repo.EmailAlreadyExistsError as exc:
        raise EmailAlreadyExists("email_already_exists") from exc

    try:
        doctor = await doctors_repo.create_doctor(
            session,
            doctor_id=user.id,
            email=user.email,
            username=payload.username,
        )
    except doctors_repo.DoctorAlreadyExistsError as exc:
        # the user id is fresh, so only the username can clash.
        # The caller's rollback drops the user row.
        raise UsernameTaken("username_taken") from exc

    await write_audit_log(session, user.id, "REGISTER", f"username={doctor.username}")
    return to_public(doctor)


def _session_tokens(doctor: Doctor, refresh_token: Optional[str] = None) -> LoginResponse:
    # doctor.id is the principal's user id
    access = create_access_token(
        subject=str(doctor.id),
        email=doctor.email,
        username=doctor.username,
    )
    return LoginResponse(
        access_token=access,
        expires_in=settings.ACCESS_EXPIRES_MIN * 60,
        refresh_token=refresh_token or create_refresh_token(subject=str(doctor.id)),
        profile_completed=doctor.profile_completed,
    )


async def login_doctor(session: AsyncSession, payload: LoginRequest) -> LoginResponse:
    """
    1) Fetch user by email
    2) Verify bcrypt password
    3) Make sure the doctor profile exists (session establishment)
    4) Issue access + refresh tokens
    """
    user = await users_repo.get_by_email(session, payload.email)
    if not user or not user.is_active:
        raise InvalidCredentials("invalid_credentials")

    if not verify_password(payload.password.get_secret_value(), user.password_hash):
        raise InvalidCredentials("invalid_credentials")

    doctor = await ensure_doctor_profile(session, user)
    return _session_tokens(doctor)


async def refresh_session(
    session: AsyncSession, user_id: UUID, refresh_token: str
) -> LoginResponse:
    """
    New access token for a still active principal; the refresh token is kept.
    """
    user = await users_repo.get_by_id(session, user_id)
    if not user or not user.is_active:
        raise InvalidCredentials("user_not_found")

    doctor = await ensure_doctor_profile(session, user)
    return _session_tokens(doctor, refresh_token)
