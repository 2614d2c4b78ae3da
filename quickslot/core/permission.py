# quickslot/core/permission.py
from __future__ import annotations

from fastapi import Depends, HTTPException, status

from quickslot.dependencies import get_current_doctor
from quickslot.modules.doctors.models import Doctor


async def require_completed_profile(
    doctor: Doctor = Depends(get_current_doctor),
) -> Doctor:
    """
    Gate for the dashboard: the profile form must have been saved once.
    """
    if not doctor.profile_completed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="profile_incomplete",
        )
    return doctor
