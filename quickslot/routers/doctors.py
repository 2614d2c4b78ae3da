# quickslot/routers/doctors.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.db.sql import get_session
from quickslot.dependencies import get_current_doctor
from quickslot.modules.doctors.models import Doctor
from quickslot.modules.doctors.schemas import DoctorPublic, ProfileUpdateRequest
from quickslot.modules.doctors.service import to_public, update_profile

router = APIRouter(prefix="/doctors", tags=["doctors"])


@router.get(
    "/me",
    response_model=DoctorPublic,
    summary="Current doctor's profile and booking link",
)
async def doctors_me(doctor: Doctor = Depends(get_current_doctor)):
    return to_public(doctor)


@router.put(
    "/me",
    response_model=DoctorPublic,
    summary="Save the profile form (marks the profile completed)",
)
async def doctors_update_me(
    payload: ProfileUpdateRequest,
    session: AsyncSession = Depends(get_session),
    doctor: Doctor = Depends(get_current_doctor),
):
    return await update_profile(session, doctor, payload)
