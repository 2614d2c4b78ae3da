# quickslot/modules/appointments/service.py
from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.core import times
from quickslot.modules.appointments.models import (
    ALLOWED_TRANSITIONS,
    Appointment,
    ApptStatus,
)
from quickslot.modules.appointments.schemas import (
    AppointmentListPage,
    AppointmentPublic,
    BookingConfirmation,
    BookingRequest,
    StatusUpdateRequest,
)
from quickslot.modules.doctors.models import Doctor
from quickslot.modules.log import write_audit_log
from quickslot.modules.slots import repository as slots_repo

logger = logging.getLogger(__name__)


# Custom errors, mapped to HTTP by the routers
class SlotUnavailable(Exception):
    """
    The slot was claimed by someone else (or closed) before this booking.
    """


class SlotNotFound(Exception):
    pass


class AppointmentNotFound(Exception):
    pass


class InvalidStatusTransition(Exception):
    pass


def _to_public(appt: Appointment) -> AppointmentPublic:
    return AppointmentPublic.model_validate(appt)


# BOOK
async def book_slot(
    session: AsyncSession,
    doctor: Doctor,
    payload: BookingRequest,
    *,
    today: Optional[date] = None,
) -> BookingConfirmation:
    """
    Claim a slot for a patient, in the caller's transaction:

    1) Conditional update is_booked false -> true, only while the slot is
       still bookable for this doctor. Zero rows means missing or taken.
    2) Insert the appointment. The unique slot_id constraint is the last
       line: a violation means another booking won, and the caller's
       rollback also undoes step 1.
    """
    today = today or times.today()

    claimed = await slots_repo.claim_slot(
        session, doctor_id=doctor.id, slot_id=payload.slot_id, today=today
    )
    slot = await slots_repo.get_for_doctor(session, doctor_id=doctor.id, slot_id=payload.slot_id)
    if slot is None:
        raise SlotNotFound("slot_not_found")
    if not claimed:
        logger.info("slot %s no longer available for %s", payload.slot_id, doctor.username)
        raise SlotUnavailable("slot_no_longer_available")

    # plain values: a failed flush expires every ORM instance in the session
    slot_id, slot_date = slot.id, slot.slot_date
    start_time, end_time = slot.start_time, slot.end_time

    appt = Appointment(
        slot_id=slot_id,
        doctor_id=doctor.id,
        patient_name=payload.patient_name,
        patient_phone=payload.patient_phone,
        patient_email=payload.patient_email,
        patient_notes=payload.patient_notes,
        appointment_date=slot_date,
        appointment_time=start_time,
        status=ApptStatus.CONFIRMED.value,
    )
    session.add(appt)
    try:
        await session.flush()
    except IntegrityError as exc:
        logger.info("duplicate claim on slot %s rejected by constraint", slot_id)
        raise SlotUnavailable("slot_no_longer_available") from exc

    await write_audit_log(
        session,
        doctor.id,
        "CREATE_APPOINTMENT",
        f"appointment={appt.id} slot={slot_id}",
    )

    return BookingConfirmation(
        id=appt.id,
        slot_id=slot_id,
        status=appt.status,
        patient_name=appt.patient_name,
        patient_phone=appt.patient_phone,
        patient_email=appt.patient_email,
        appointment_date=appt.appointment_date,
        appointment_time=appt.appointment_time,
        doctor_name=doctor.full_name,
        doctor_specialty=doctor.specialty,
        formatted_date=times.format_long_date(slot_date),
        formatted_time=f"{start_time} - {end_time}",
    )


# STATUS
async def update_status(
    session: AsyncSession,
    doctor: Doctor,
    appointment_id: UUID,
    payload: StatusUpdateRequest,
) -> AppointmentPublic:
    """
    confirmed -> completed | no_show | cancelled. Terminal states are final.
    Cancelling leaves the slot booked.
    """
    appt = await _get_owned(session, doctor.id, appointment_id)

    allowed = ALLOWED_TRANSITIONS.get(appt.status, frozenset())
    if payload.status not in allowed:
        raise InvalidStatusTransition(f"{appt.status}->{payload.status}")

    previous = appt.status
    appt.status = payload.status
    if payload.doctor_notes is not None:
        appt.doctor_notes = payload.doctor_notes.strip() or None
    await session.flush()

    await write_audit_log(
        session,
        doctor.id,
        "APPOINTMENT_STATUS",
        f"appointment={appt.id} {previous}->{appt.status}",
    )
    return _to_public(appt)


async def _get_owned(session: AsyncSession, doctor_id: UUID, appointment_id: UUID) -> Appointment:
    row = await session.execute(
        select(Appointment).where(
            Appointment.id == appointment_id,
            Appointment.doctor_id == doctor_id,
        )
    )
    appt = row.scalar_one_or_none()
    if appt is None:
        raise AppointmentNotFound("appointment_not_found")
    return appt


async def get_appointment(
    session: AsyncSession, doctor: Doctor, appointment_id: UUID
) -> AppointmentPublic:
    return _to_public(await _get_owned(session, doctor.id, appointment_id))


# LIST
async def list_appointments(
    session: AsyncSession,
    doctor: Doctor,
    *,
    status: Optional[str] = None,
    q: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
) -> AppointmentListPage:
    """
    Doctor's appointments, newest first, with optional status filter and a
    search over patient name (case-insensitive) or phone.
    """
    conditions = [Appointment.doctor_id == doctor.id]
    if status:
        conditions.append(Appointment.status == status)
    if q and q.strip():
        term = q.strip()
        conditions.append(
            or_(
                func.lower(Appointment.patient_name).contains(term.lower(), autoescape=True),
                Appointment.patient_phone.contains(term, autoescape=True),
            )
        )

    total_stmt = select(func.count()).select_from(Appointment).where(*conditions)
    total = (await session.execute(total_stmt)).scalar_one()

    stmt = (
        select(Appointment)
        .where(*conditions)
        .order_by(Appointment.created_at.desc(), Appointment.id)
        .limit(limit)
        .offset(offset)
    )
    rows: List[Appointment] = list((await session.execute(stmt)).scalars().all())
    return AppointmentListPage(
        items=[_to_public(a) for a in rows],
        total=total,
        limit=limit,
        offset=offset,
        has_next=offset + limit < total,
    )
