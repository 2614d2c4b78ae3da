# quickslot/db/sql.py
from __future__ import annotations

import logging
import uuid
from typing import Any, AsyncIterator

from fastapi import Request
from sqlalchemy import insert, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from quickslot.core.config import settings
from quickslot.db.base import Base

logger = logging.getLogger(__name__)


def _engine_kwargs(dsn: str) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"echo": settings.DB_ECHO}
    # SQLite (tests, local dev) has no server pool to tune
    if not dsn.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )
    return kwargs


def make_engine(dsn: str | None = None) -> AsyncEngine:
    dsn = dsn or settings.SQL_DSN
    return create_async_engine(dsn, **_engine_kwargs(dsn))


def make_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )


engine = make_engine()
AsyncSessionLocal = make_sessionmaker(engine)


async def _audit_rollback(
    session: AsyncSession, request: Request, exc: BaseException
) -> None:
    from quickslot.modules.doctors.models import AuditLog

    user_id = getattr(request.state, "doctor_id", None)
    try:
        await session.execute(
            insert(AuditLog).values(
                id=uuid.uuid4(),
                user_id=user_id,
                action=f"{request.method} {request.url.path} ROLLBACK",
                details=(str(exc) or exc.__class__.__name__)[:1000],
            )
        )
        await session.commit()
    except Exception:
        logger.exception("could not write rollback audit entry")
        await session.rollback()


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """
    Provide one DB session (and one transaction) per request.
    Commit on success; on any exception roll back, record the rollback in
    the audit log and re-raise.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as exc:
            await session.rollback()
            logger.info(
                "rolled back %s %s: %s", request.method, request.url.path, exc
            )
            await _audit_rollback(session, request, exc)
            raise


async def ping_db(session: AsyncSession) -> bool:
    await session.execute(text("SELECT 1"))
    return True


async def init_db(bind: AsyncEngine | None = None, *, drop: bool = False) -> None:
    """
    Create tables for every model (dev / tests). Production uses Alembic.
    """
    # register all models on Base.metadata
    from quickslot.modules.accounts import models as _accounts  # noqa: F401
    from quickslot.modules.appointments import models as _appointments  # noqa: F401
    from quickslot.modules.doctors import models as _doctors  # noqa: F401
    from quickslot.modules.schedules import models as _schedules  # noqa: F401
    from quickslot.modules.slots import models as _slots  # noqa: F401

    async with (bind or engine).begin() as conn:
        if drop:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
