"""
Account operations: signup, driver onboarding, login and token refresh.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple
from uuid import UUID, uuid4

import jwt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.api.errors import Conflict, NotFound, Unauthorized
from src.api.models.driver import Driver
from src.api.models.user import Rider, User, UserRole
from src.api.security import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return str(email).lower().strip()


def signup(db: Session, *, name: str, email: str, password: str) -> User:
    """
    Create a rider account and its rider profile.

    Raises:
        Conflict: if the email is already registered.
    """
    user = User(
        id=uuid4(),
        name=name.strip(),
        email=_normalize_email(email),
        password_hash=hash_password(password),
        role=UserRole.rider,
    )
    db.add(user)
    db.add(Rider(id=user.id, rating=5.0))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("An account with this email already exists.")
    db.refresh(user)
    logger.info("User %s signed up", user.id)
    return user


def onboard_driver(
    db: Session,
    *,
    user_id: UUID,
    license_number: str,
    vehicle_number: str,
    vehicle_type: Optional[str] = None,
) -> Driver:
    """
    Upgrade an existing rider to a driver and create the driver profile.

    Raises:
        NotFound: if the user does not exist.
        Conflict: if the user is already a driver or is an admin.
    """
    user = db.scalar(select(User).where(User.id == user_id))
    if not user:
        raise NotFound("User not found.")
    if user.role == UserRole.driver:
        raise Conflict("User is already a driver.")
    if user.role == UserRole.admin:
        raise Conflict("Admin accounts cannot be onboarded as drivers.")

    user.role = UserRole.driver
    driver = Driver(
        id=user.id,
        license_number=license_number.strip(),
        vehicle_number=vehicle_number.strip(),
        vehicle_type=vehicle_type.strip() if vehicle_type is not None else None,
        rating=5.0,
        is_available=True,
        updated_at=datetime.now(timezone.utc),
    )
    db.add(driver)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("User is already a driver.")
    db.refresh(driver)
    logger.info("User %s onboarded as driver", user.id)
    return driver


def login(db: Session, *, email: str, password: str) -> Tuple[str, str]:
    """
    Verify credentials and return (access_token, refresh_token).

    Raises:
        Unauthorized: for unknown email or wrong password.
    """
    user = db.scalar(select(User).where(User.email == _normalize_email(email)))
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise Unauthorized("Invalid email or password.")

    access = create_access_token(subject=user.id, role=user.role.value)
    refresh = create_refresh_token(subject=user.id, role=user.role.value)
    return access, refresh


def refresh_access_token(db: Session, refresh_token: Optional[str]) -> str:
    """
    Mint a new access token from a refresh token.

    The role claim is taken from the current user row so a role change
    (driver onboarding) shows up on the next refresh.

    Raises:
        Unauthorized: if the token is missing, invalid, expired, not a refresh
            token, or its user no longer exists.
    """
    if not refresh_token:
        raise Unauthorized("Refresh token not found.")
    try:
        payload = decode_token(refresh_token, expected_type=REFRESH_TOKEN_TYPE)
        user_id = UUID(str(payload.get("sub")))
    except (jwt.PyJWTError, ValueError):
        raise Unauthorized("Invalid or expired refresh token.")

    user = db.scalar(select(User).where(User.id == user_id))
    if not user:
        raise Unauthorized("Invalid or expired refresh token.")
    return create_access_token(subject=user.id, role=user.role.value)


def ensure_admin(db: Session, *, email: str, password: str, name: str = "Administrator") -> User:
    """Create the admin account if no user with that email exists yet."""
    normalized = _normalize_email(email)
    existing = db.scalar(select(User).where(User.email == normalized))
    if existing:
        return existing
    admin = User(
        id=uuid4(),
        name=name,
        email=normalized,
        password_hash=hash_password(password),
        role=UserRole.admin,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Seeded admin account %s", admin.id)
    return admin
