# quickslot/routers/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from quickslot.core.security import (
    InvalidTokenError,
    decode_token,
    is_refresh_token,
    subject_id,
)
from quickslot.db.sql import get_session
from quickslot.dependencies import get_current_doctor
from quickslot.modules.accounts.schemas import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RegisterRequest,
    UsernameAvailability,
)
from quickslot.modules.accounts.service import (
    EmailAlreadyExists,
    InvalidCredentials,
    UsernameTaken,
    is_username_available,
    login_doctor,
    refresh_session,
    register_doctor,
)
from quickslot.modules.doctors.models import Doctor
from quickslot.modules.doctors.schemas import DoctorPublic
from quickslot.modules.doctors.service import to_public

router = APIRouter(tags=["auth"])


@router.post(
    "/auth/register",
    response_model=DoctorPublic,
    status_code=status.HTTP_201_CREATED,
    summary="Create a doctor account",
    responses={
        201: {"description": "Account and profile created"},
        409: {"description": "Username or email already taken"},
    },
)
async def auth_register(
    payload: RegisterRequest,
    session: AsyncSession = Depends(get_session),
):
    """
    Register a doctor. The profile starts incomplete (`profile_completed=false`).
    """
    try:
        return await register_doctor(session, payload)
    except UsernameTaken:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="username_taken",
        )
    except EmailAlreadyExists:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="email_already_exists",
        )


@router.get(
    "/auth/username-available",
    response_model=UsernameAvailability,
    summary="Check whether a booking username is still free",
)
async def auth_username_available(
    username: str = Query(..., min_length=3, max_length=30, pattern="^[a-z0-9-]+$"),
    session: AsyncSession = Depends(get_session),
):
    return UsernameAvailability(
        username=username,
        available=await is_username_available(session, username),
    )


@router.post(
    "/auth/login",
    response_model=LoginResponse,
    summary="Obtain a Bearer token with email and password (JSON body)",
    responses={401: {"description": "Invalid credentials"}},
)
async def auth_login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_session),
):
    try:
        return await login_doctor(session, payload)
    except InvalidCredentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid_credentials",
        )


@router.post(
    "/auth/token",
    response_model=LoginResponse,
    summary="OAuth2 password flow login (for Swagger UI)",
    responses={401: {"description": "Invalid credentials"}},
)
async def auth_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: AsyncSession = Depends(get_session),
):
    """
    Swagger sends form data: username = email, password.
    """
    try:
        login_payload = LoginRequest(email=form_data.username, password=form_data.password)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid_credentials",
        )
    try:
        return await login_doctor(session, login_payload)
    except InvalidCredentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid_credentials",
        )


@router.get(
    "/auth/me",
    response_model=DoctorPublic,
    summary="Return the current doctor's profile",
)
async def auth_me(doctor: Doctor = Depends(get_current_doctor)):
    return to_public(doctor)


@router.post(
    "/auth/refresh",
    response_model=LoginResponse,
    summary="Exchange a refresh token for a new access token",
    responses={401: {"description": "Invalid refresh token"}},
)
async def auth_refresh(
    request: RefreshRequest,
    session: AsyncSession = Depends(get_session),
):
    try:
        payload = decode_token(request.refresh_token)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid_token",
        )

    if not is_refresh_token(payload):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid_token_type",
        )

    try:
        user_id = subject_id(payload)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid_token",
        )

    try:
        return await refresh_session(session, user_id, request.refresh_token)
    except InvalidCredentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="user_not_found",
        )
