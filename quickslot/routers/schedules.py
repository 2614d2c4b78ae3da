# quickslot/routers/schedules.py
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.db.sql import get_session
from quickslot.dependencies import get_current_doctor
from quickslot.modules.doctors.models import Doctor
from quickslot.modules.schedules import service as schedules_svc
from quickslot.modules.schedules.schemas import (
    GenerateSlotsRequest,
    GenerateSlotsResult,
    ScheduleCreate,
    SchedulePublic,
)

router = APIRouter(prefix="/schedules", tags=["schedules"])


@router.post(
    "",
    response_model=SchedulePublic,
    status_code=status.HTTP_201_CREATED,
    summary="Create a recurring weekly schedule",
)
async def create_schedule(
    payload: ScheduleCreate,
    session: AsyncSession = Depends(get_session),
    doctor: Doctor = Depends(get_current_doctor),
):
    return await schedules_svc.create_schedule(session, doctor.id, payload)


@router.get(
    "",
    response_model=list[SchedulePublic],
    summary="List the current doctor's schedules",
)
async def list_schedules(
    session: AsyncSession = Depends(get_session),
    doctor: Doctor = Depends(get_current_doctor),
):
    return await schedules_svc.list_schedules(session, doctor.id)


@router.delete(
    "/{schedule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a schedule (already generated slots are kept)",
)
async def delete_schedule(
    schedule_id: UUID,
    session: AsyncSession = Depends(get_session),
    doctor: Doctor = Depends(get_current_doctor),
):
    try:
        await schedules_svc.delete_schedule(session, doctor.id, schedule_id)
    except schedules_svc.ScheduleNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="schedule_not_found",
        )
    return None


@router.post(
    "/generate",
    response_model=GenerateSlotsResult,
    summary="Expand active schedules into bookable slots for the next N days",
)
async def generate_slots(
    payload: GenerateSlotsRequest,
    session: AsyncSession = Depends(get_session),
    doctor: Doctor = Depends(get_current_doctor),
):
    try:
        created = await schedules_svc.generate_slots_from_schedules(
            session, doctor.id, payload.days_ahead
        )
    except schedules_svc.SlotGenerationConflict:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="slot_generation_conflict",
        )
    return GenerateSlotsResult(days_ahead=payload.days_ahead, created=created)
