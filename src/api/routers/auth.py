from uuid import UUID

from fastapi import APIRouter, Cookie, Depends, Response, status
from sqlalchemy.orm import Session

from src.api import config
from src.api.db import get_db
from src.api.deps import require_admin
from src.api.errors import error_responses
from src.api.models.user import User
from src.api.routers.common import driver_to_public, user_to_public
from src.api.schemas.auth import LoginRequest, SignupRequest, TokenResponse
from src.api.schemas.driver import DriverOnboardRequest, DriverPublic
from src.api.schemas.user import UserPublic
from src.api.security import refresh_token_max_age
from src.api.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])

REFRESH_COOKIE_NAME = "refreshToken"
REFRESH_COOKIE_PATH = "/auth/refresh"


@router.post(
    "/signup",
    response_model=UserPublic,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="Create a new rider account. Drivers are onboarded from an existing account by an admin.",
    operation_id="auth_signup",
    responses=error_responses(400, 409),
)
def signup(payload: SignupRequest, db: Session = Depends(get_db)) -> UserPublic:
    """
    Register a new rider.

    Errors:
    - 400 for invalid payload
    - 409 if email already exists
    """
    user = auth_service.signup(db, name=payload.name, email=payload.email, password=payload.password)
    return user_to_public(user)


@router.post(
    "/onboardDriver/{user_id}",
    response_model=DriverPublic,
    status_code=status.HTTP_201_CREATED,
    summary="Onboard a driver (admin only)",
    description="Convert an existing user into a driver by providing license and vehicle details.",
    operation_id="auth_onboard_driver",
    responses=error_responses(400, 401, 403, 404, 409),
)
def onboard_driver(
    user_id: UUID,
    payload: DriverOnboardRequest,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> DriverPublic:
    """
    Onboard a driver.

    Auth:
    - Bearer JWT
    - role must be 'admin'

    Errors:
    - 404 if the user does not exist
    - 409 if the user is already a driver
    """
    driver = auth_service.onboard_driver(
        db,
        user_id=user_id,
        license_number=payload.license_number,
        vehicle_number=payload.vehicle_number,
        vehicle_type=payload.vehicle_type,
    )
    return driver_to_public(driver)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login",
    description=(
        "Authenticate by email/password. Returns the access token in the body and sets an httpOnly "
        "refresh token cookie scoped to /auth/refresh."
    ),
    operation_id="auth_login",
    responses=error_responses(400, 401),
)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)) -> TokenResponse:
    """
    Login by verifying user credentials.

    Errors:
    - 401 for invalid credentials
    """
    access_token, refresh_token = auth_service.login(db, email=payload.email, password=payload.password)
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value=refresh_token,
        max_age=refresh_token_max_age(),
        path=REFRESH_COOKIE_PATH,
        httponly=True,
        secure=config.is_production(),
        samesite="strict",
    )
    return TokenResponse(access_token=access_token)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh access token",
    description="Use the httpOnly refresh token cookie set at /auth/login to issue a new access token.",
    operation_id="auth_refresh",
    responses=error_responses(401),
)
def refresh(
    refresh_token: str | None = Cookie(default=None, alias=REFRESH_COOKIE_NAME),
    db: Session = Depends(get_db),
) -> TokenResponse:
    """
    Issue a new access token.

    Errors:
    - 401 if the cookie is missing or the refresh token is invalid/expired
    """
    return TokenResponse(access_token=auth_service.refresh_access_token(db, refresh_token))
