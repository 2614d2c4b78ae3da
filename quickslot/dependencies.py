# quickslot/dependencies.py
from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.core.config import settings
from quickslot.core.security import (
    InvalidTokenError,
    decode_token,
    is_access_token,
    subject_id,
)
from quickslot.db.sql import get_session
from quickslot.modules.accounts.repository import get_by_id
from quickslot.modules.doctors.models import Doctor
from quickslot.modules.doctors.service import ensure_doctor_profile

# /auth/token so Swagger sends username/password to that endpoint
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/token"
)


async def get_current_doctor(
    request: Request,
    token: str = Depends(oauth2_scheme),
    session: AsyncSession = Depends(get_session),
) -> Doctor:
    """
    Resolve the practitioner behind the Bearer token. The doctor row is
    healed here if it went missing, so handlers can rely on it.
    """
    try:
        payload = decode_token(token)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid_token",
        )

    if not is_access_token(payload):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid_token_type",
        )

    try:
        user_id = subject_id(payload)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid_token",
        )

    user = await get_by_id(session, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="user_not_found",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="user_inactive",
        )

    doctor = await ensure_doctor_profile(session, user)
    request.state.doctor_id = doctor.id
    return doctor
