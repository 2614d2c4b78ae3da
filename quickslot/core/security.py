# quickslot/core/security.py
"""
Practitioner credentials and session tokens.

A practitioner session is a pair of HS256 JWTs whose `sub` is the user id,
which is also the doctor id. Access tokens carry the email and booking
username for display; refresh tokens carry nothing but the subject.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from quickslot.core.config import settings

# bcrypt_sha256 lifts bcrypt's 72-byte limit; plain bcrypt hashes still verify
_pwd_ctx = CryptContext(
    schemes=["bcrypt_sha256", "bcrypt"],
    default="bcrypt_sha256",
    deprecated="auto",
)


def hash_password(plain_password: str) -> str:
    if not isinstance(plain_password, str) or plain_password == "":
        raise ValueError("Password must be a non-empty string")
    return _pwd_ctx.hash(plain_password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """False for an empty input or an unreadable stored hash."""
    if not password_hash or not plain_password:
        return False
    try:
        return _pwd_ctx.verify(plain_password, password_hash)
    except ValueError:
        return False


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


ALGORITHM = "HS256"


class InvalidTokenError(Exception):
    """Bad signature, expired, malformed, or missing the claims a session needs."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _encode(claims: Dict[str, Any], expires_at: datetime) -> str:
    to_encode = {
        **claims,
        "iat": int(_utcnow().timestamp()),
        "exp": int(expires_at.timestamp()),
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=ALGORITHM)


def create_access_token(
    *,
    subject: str,
    email: Optional[str] = None,
    username: Optional[str] = None,
    expires_minutes: Optional[int] = None,
) -> str:
    claims: Dict[str, Any] = {"sub": subject, "type": TokenType.ACCESS.value}
    if email:
        claims["email"] = email
    if username:
        claims["username"] = username
    minutes = expires_minutes or settings.ACCESS_EXPIRES_MIN
    return _encode(claims, _utcnow() + timedelta(minutes=minutes))


def create_refresh_token(*, subject: str, expires_days: Optional[int] = None) -> str:
    days = expires_days or settings.REFRESH_EXPIRES_DAYS
    claims = {"sub": subject, "type": TokenType.REFRESH.value}
    return _encode(claims, _utcnow() + timedelta(days=days))


def decode_token(token: str) -> Dict[str, Any]:
    if not token:
        raise InvalidTokenError("missing_token")
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise InvalidTokenError("invalid_token") from exc

    if "sub" not in payload or payload.get("type") not in {t.value for t in TokenType}:
        raise InvalidTokenError("invalid_claims")
    return payload


def subject_id(payload: Dict[str, Any]) -> uuid.UUID:
    """The user (= doctor) id a decoded token was issued for."""
    try:
        return uuid.UUID(str(payload.get("sub")))
    except ValueError as exc:
        raise InvalidTokenError("invalid_subject") from exc


def is_access_token(payload: Dict[str, Any]) -> bool:
    return payload.get("type") == TokenType.ACCESS.value


def is_refresh_token(payload: Dict[str, Any]) -> bool:
    return payload.get("type") == TokenType.REFRESH.value
