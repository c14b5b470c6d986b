"""
Shared FastAPI dependencies for authentication/authorization.

This module centralizes JWT parsing and role checks so routers can enforce
consistent access controls. Routers attach `require_role(...)` at router level,
so the caller's role is checked against the allow-list before any handler runs.
"""

from __future__ import annotations

from typing import Any, Callable, Dict
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.db import get_db
from src.api.errors import Forbidden, Unauthorized
from src.api.models.user import User, UserRole
from src.api.security import decode_token

bearer_scheme = HTTPBearer(auto_error=False)


# PUBLIC_INTERFACE
def get_current_token_payload(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Dict[str, Any]:
    """
    Return decoded JWT payload for the current request.

    Authentication: Bearer JWT access token.

    Raises:
        Unauthorized: if token missing/invalid/expired or is a refresh token.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthorized("Missing authentication token.")
    try:
        payload = decode_token(credentials.credentials)
    except jwt.PyJWTError:
        raise Unauthorized("Invalid or expired token.")

    if not payload.get("sub"):
        raise Unauthorized("Invalid token.")
    return payload


# PUBLIC_INTERFACE
def get_current_user_id(payload: Dict[str, Any] = Depends(get_current_token_payload)) -> UUID:
    """
    Return current authenticated user's id (UUID).

    Raises:
        Unauthorized: if sub is not a valid UUID.
    """
    try:
        return UUID(str(payload.get("sub")))
    except (TypeError, ValueError):
        raise Unauthorized("Invalid token.")


# PUBLIC_INTERFACE
def get_current_user(db: Session = Depends(get_db), user_id: UUID = Depends(get_current_user_id)) -> User:
    """
    Return the current authenticated User ORM object.

    The role is read from the database, not the token, so an onboarded driver
    is recognised without re-login.

    Raises:
        Unauthorized: if token valid but user missing (treat as unauth).
    """
    user = db.scalar(select(User).where(User.id == user_id))
    if not user:
        raise Unauthorized("Invalid or expired token.")
    return user


# PUBLIC_INTERFACE
def require_role(*roles: UserRole) -> Callable[..., User]:
    """
    Build a dependency that admits only users whose role is in `roles`.

    Raises:
        Forbidden: if the user's role is not allowed.
    """
    allowed = {r.value for r in roles}
    label = " or ".join(sorted(allowed))

    def _checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role.value not in allowed:
            raise Forbidden(f"{label.capitalize()} role required.")
        return current_user

    return _checker


require_rider = require_role(UserRole.rider)
require_driver = require_role(UserRole.driver)
require_admin = require_role(UserRole.admin)
