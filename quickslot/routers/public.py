# quickslot/routers/public.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.db.sql import get_session
from quickslot.modules.appointments.schemas import BookingConfirmation, BookingRequest
from quickslot.modules.appointments.service import SlotNotFound, SlotUnavailable, book_slot
from quickslot.modules.doctors.models import Doctor
from quickslot.modules.doctors.schemas import BookingPage, DoctorCard
from quickslot.modules.doctors.service import DoctorNotFound, get_doctor_by_username
from quickslot.modules.slots.schemas import AvailableSlot
from quickslot.modules.slots.service import list_available_slots

router = APIRouter(prefix="/book", tags=["public"])


async def _doctor_or_404(username: str, session: AsyncSession) -> Doctor:
    try:
        return await get_doctor_by_username(session, username.lower())
    except DoctorNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="doctor_not_found",
        )


@router.get(
    "/{username}",
    response_model=BookingPage,
    summary="Public booking page: doctor card and open slots",
)
async def booking_page(username: str, session: AsyncSession = Depends(get_session)):
    """
    No authentication. Slots cover today through the booking window.
    """
    doctor = await _doctor_or_404(username, session)
    slots = await list_available_slots(session, doctor.id)
    return BookingPage(doctor=DoctorCard.model_validate(doctor), slots=slots)


@router.get(
    "/{username}/slots",
    response_model=List[AvailableSlot],
    summary="Open slots only (used to refresh the page after a conflict)",
)
async def booking_slots(username: str, session: AsyncSession = Depends(get_session)):
    doctor = await _doctor_or_404(username, session)
    return await list_available_slots(session, doctor.id)


@router.post(
    "/{username}/appointments",
    response_model=BookingConfirmation,
    status_code=status.HTTP_201_CREATED,
    summary="Book an open slot",
    responses={
        404: {"description": "Doctor or slot not found"},
        409: {"description": "Slot was taken in the meantime"},
    },
)
async def booking_create(
    username: str,
    payload: BookingRequest,
    session: AsyncSession = Depends(get_session),
):
    doctor = await _doctor_or_404(username, session)
    try:
        return await book_slot(session, doctor, payload)
    except SlotNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="slot_not_found",
        )
    except SlotUnavailable:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="slot_no_longer_available",
        )
