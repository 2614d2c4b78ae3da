# quickslot/routers/dashboard.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.core.permission import require_completed_profile
from quickslot.db.sql import get_session
from quickslot.modules.dashboard.schemas import DashboardSummary
from quickslot.modules.dashboard.service import get_summary
from quickslot.modules.doctors.models import Doctor

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "",
    response_model=DashboardSummary,
    summary="Today's and this week's bookings, open slots and recent bookings",
    responses={403: {"description": "Profile not completed yet"}},
)
async def dashboard(
    session: AsyncSession = Depends(get_session),
    doctor: Doctor = Depends(require_completed_profile),
):
    return await get_summary(session, doctor)
