# quickslot/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from quickslot.core.config import settings
from quickslot.db.sql import init_db
from quickslot.routers import (
    appointments,
    auth,
    dashboard,
    doctors,
    health,
    public,
    schedules,
    slots,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Tables are managed by Alembic; DB_CREATE_ALL only helps local dev.
    """
    logger.info("%s %s starting (%s)", settings.APP_NAME, settings.APP_VERSION, settings.APP_ENV)
    if settings.DB_CREATE_ALL:
        await init_db()
        logger.info("Database tables created")
    yield
    logger.info("Application shutting down...")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    # the request transaction has already been rolled back by get_session
    logger.error("database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "something_went_wrong"})


# Routing
app.include_router(health.router, prefix=settings.API_PREFIX)
app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(doctors.router, prefix=settings.API_PREFIX)
app.include_router(schedules.router, prefix=settings.API_PREFIX)
app.include_router(slots.router, prefix=settings.API_PREFIX)
app.include_router(appointments.router, prefix=settings.API_PREFIX)
app.include_router(dashboard.router, prefix=settings.API_PREFIX)
app.include_router(public.router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    return {"message": f"{settings.APP_NAME} running", "version": settings.APP_VERSION}
