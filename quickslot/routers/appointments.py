# quickslot/routers/appointments.py
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.db.sql import get_session
from quickslot.dependencies import get_current_doctor
from quickslot.modules.appointments.schemas import (
    AppointmentListPage,
    AppointmentPublic,
    AppointmentStatus,
    StatusUpdateRequest,
)
from quickslot.modules.appointments.service import (
    AppointmentNotFound,
    InvalidStatusTransition,
    get_appointment,
    list_appointments,
    update_status,
)
from quickslot.modules.doctors.models import Doctor

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.get(
    "",
    response_model=AppointmentListPage,
    summary="Current doctor's appointments, newest first",
)
async def appointments_index(
    status_filter: AppointmentStatus | None = Query(None, alias="status"),
    q: str | None = Query(None, description="Search on patient name or phone"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
    doctor: Doctor = Depends(get_current_doctor),
):
    return await list_appointments(
        session,
        doctor,
        status=status_filter.value if status_filter else None,
        q=q,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/{appointment_id}",
    response_model=AppointmentPublic,
    summary="One appointment with its slot",
)
async def appointments_get(
    appointment_id: UUID,
    session: AsyncSession = Depends(get_session),
    doctor: Doctor = Depends(get_current_doctor),
):
    try:
        return await get_appointment(session, doctor, appointment_id)
    except AppointmentNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="appointment_not_found",
        )


@router.patch(
    "/{appointment_id}/status",
    response_model=AppointmentPublic,
    summary="Mark a confirmed appointment completed, no-show or cancelled",
    responses={409: {"description": "Appointment is not confirmed"}},
)
async def appointments_update_status(
    appointment_id: UUID,
    payload: StatusUpdateRequest,
    session: AsyncSession = Depends(get_session),
    doctor: Doctor = Depends(get_current_doctor),
):
    try:
        return await update_status(session, doctor, appointment_id, payload)
    except AppointmentNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="appointment_not_found",
        )
    except InvalidStatusTransition:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="invalid_status_transition",
        )
