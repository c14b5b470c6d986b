"""
FastAPI application entrypoint for the ride-hailing backend.

Provides:
- Health check
- Authentication (/auth/*): signup, admin driver onboarding, login, refresh
- Rider actions (/rider/*): profile, ride history, request/cancel rides, rate drivers
- Driver actions (/driver/*): profile, ride history, accept/start/end/cancel rides, rate riders

Configuration (see src/api/config.py):
- DATABASE_URL: SQLAlchemy connection string
- JWT_SECRET_KEY: secret used to sign access and refresh tokens
- DEPLOY_ENV: "production" marks the refresh cookie Secure
- ADMIN_EMAIL / ADMIN_PASSWORD: optional admin account seeded at startup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api import config
from src.api.db import init_db, session_scope
from src.api.errors import register_error_handlers
from src.api.routers import auth as auth_router
from src.api.routers import driver as driver_router
from src.api.routers import rider as rider_router
from src.api.services.auth_service import ensure_admin

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Health and readiness endpoints."},
    {"name": "auth", "description": "Signup, driver onboarding, login and token refresh."},
    {"name": "rider", "description": "Rider profile, ride history, ride requests, cancellation and driver rating."},
    {"name": "driver", "description": "Driver profile, ride history, ride lifecycle and rider rating."},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if config.ADMIN_EMAIL and config.ADMIN_PASSWORD:
        with session_scope() as db:
            ensure_admin(db, email=config.ADMIN_EMAIL, password=config.ADMIN_PASSWORD)
    logger.info("Ride-hailing backend started (env=%s)", config.DEPLOY_ENV)
    yield


app = FastAPI(
    title="Ride-Hailing Backend",
    description="Backend API for riders, drivers and admins.",
    version="0.1.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

# Basic permissive CORS for early development; tighten for production later.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(auth_router.router)
app.include_router(rider_router.router)
app.include_router(driver_router.router)


@app.get(
    "/",
    tags=["health"],
    summary="Health check",
    description="Simple health check endpoint.",
    operation_id="health_check",
)
def health_check():
    """Return a simple health response."""
    return {"message": "Healthy"}
