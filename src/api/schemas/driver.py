from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class DriverOnboardRequest(BaseModel):
    license_number: str = Field(..., min_length=1, max_length=100, description="Driver license number.")
    vehicle_number: str = Field(..., min_length=1, max_length=50, description="Vehicle registration plate.")
    vehicle_type: Optional[str] = Field(
        default=None,
        max_length=50,
        description="Vehicle category (e.g. Sedan, Hatchback, Auto).",
    )


class DriverPublic(BaseModel):
    id: UUID = Field(..., description="Driver user id (same as users.id).")
    name: str = Field(..., description="Full name")
    email: str = Field(..., description="Email address")
    license_number: str = Field(..., description="License number.")
    vehicle_number: str = Field(..., description="Vehicle registration plate.")
    vehicle_type: Optional[str] = Field(default=None, description="Vehicle category.")
    rating: float = Field(..., description="Average rating received from riders.")
    is_available: bool = Field(..., description="Whether the driver can accept a new ride.")
    updated_at: datetime = Field(..., description="When driver record was last updated.")
