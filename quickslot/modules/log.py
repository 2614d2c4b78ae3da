from __future__ import annotations

import logging
import uuid

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.modules.doctors.models import AuditLog

logger = logging.getLogger(__name__)


async def write_audit_log(
    session: AsyncSession,
    user_id: uuid.UUID | None,
    action: str,
    details: str | None = None,
):
    """
    Write an audit log entry inside the caller's transaction.

    action:
        "REGISTER"
        "PROFILE_CREATED"
        "PROFILE_UPDATED"
        "GENERATE_SLOTS"
        "CREATE_APPOINTMENT"
        "APPOINTMENT_STATUS"
    """
    logger.info("audit %s user=%s %s", action, user_id, details or "")
    stmt = insert(AuditLog).values(
        id=uuid.uuid4(),
        user_id=user_id,
        action=action,
        details=details,
    )
    await session.execute(stmt)
