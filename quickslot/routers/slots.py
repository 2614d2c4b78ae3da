# quickslot/routers/slots.py
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.db.sql import get_session
from quickslot.dependencies import get_current_doctor
from quickslot.modules.doctors.models import Doctor
from quickslot.modules.slots import service as slots_svc
from quickslot.modules.slots.schemas import SlotCreate, SlotPublic

router = APIRouter(prefix="/slots", tags=["slots"])


@router.post(
    "",
    response_model=SlotPublic,
    status_code=status.HTTP_201_CREATED,
    summary="Add a single time slot",
)
async def create_slot(
    payload: SlotCreate,
    session: AsyncSession = Depends(get_session),
    doctor: Doctor = Depends(get_current_doctor),
):
    try:
        return await slots_svc.add_slot(session, doctor.id, payload)
    except slots_svc.SlotInPast:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="slot_in_past",
        )
    except slots_svc.SlotExists:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="slot_exists",
        )


@router.get(
    "",
    response_model=list[SlotPublic],
    summary="List the current doctor's slots by date and start time",
)
async def list_slots(
    upcoming_only: bool = Query(False),
    session: AsyncSession = Depends(get_session),
    doctor: Doctor = Depends(get_current_doctor),
):
    return await slots_svc.list_doctor_slots(session, doctor.id, upcoming_only=upcoming_only)


@router.delete(
    "/{slot_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an unbooked slot",
    responses={409: {"description": "Slot is booked"}},
)
async def delete_slot(
    slot_id: UUID,
    session: AsyncSession = Depends(get_session),
    doctor: Doctor = Depends(get_current_doctor),
):
    try:
        await slots_svc.delete_slot(session, doctor.id, slot_id)
    except slots_svc.SlotNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="slot_not_found",
        )
    except slots_svc.SlotBooked:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="slot_booked",
        )
    return None
