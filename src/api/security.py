from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

import jwt
from passlib.context import CryptContext

from src.api.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    BCRYPT_ROUNDS,
    JWT_ALGORITHM,
    JWT_SECRET_KEY,
    REFRESH_TOKEN_EXPIRE_DAYS,
)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_password(password: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against a stored hash."""
    return pwd_context.verify(password, password_hash)


def _encode(subject: UUID, role: str, token_type: str, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "sub": str(subject),
        "role": role,
        "type": token_type,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def create_access_token(*, subject: UUID, role: str, expires_minutes: Optional[int] = None) -> str:
    """
    Create a signed JWT access token.

    Payload fields:
    - sub: user id (UUID string)
    - role: user role
    - type: "access"
    - exp: expiration (UTC)
    - iat: issued-at (UTC)
    """
    expire_in = expires_minutes if expires_minutes is not None else ACCESS_TOKEN_EXPIRE_MINUTES
    return _encode(subject, role, ACCESS_TOKEN_TYPE, timedelta(minutes=expire_in))


def create_refresh_token(*, subject: UUID, role: str, expires_days: Optional[int] = None) -> str:
    """Create a signed JWT refresh token (type "refresh"), only valid at /auth/refresh."""
    expire_in = expires_days if expires_days is not None else REFRESH_TOKEN_EXPIRE_DAYS
    return _encode(subject, role, REFRESH_TOKEN_TYPE, timedelta(days=expire_in))


def refresh_token_max_age() -> int:
    """Refresh token lifetime in seconds, used as the cookie Max-Age."""
    return REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60


def decode_token(token: str, *, expected_type: str = ACCESS_TOKEN_TYPE) -> Dict[str, Any]:
    """
    Decode and validate a JWT token, raising jwt exceptions if invalid.

    A token whose "type" claim differs from expected_type is rejected with
    jwt.InvalidTokenError.
    """
    payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    if payload.get("type") != expected_type:
        raise jwt.InvalidTokenError(f"Expected a {expected_type} token.")
    return payload
