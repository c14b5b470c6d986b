from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field

from src.api.models.ride import RideRequestStatus, RideStatus


class RideRequestCreate(BaseModel):
    pickup_location: str = Field(..., min_length=1, max_length=500, description="Pickup address or landmark.")
    destination: str = Field(..., min_length=1, max_length=500, description="Drop-off address or landmark.")
    vehicle_type: str = Field(..., min_length=1, max_length=50, description="Requested vehicle category.")


class RideRequestPublic(BaseModel):
    id: UUID = Field(..., description="Ride request id (pass to /driver/acceptRide).")
    rider_id: UUID = Field(..., description="Rider user id who requested the ride.")
    pickup_location: str = Field(..., description="Pickup address or landmark.")
    destination: str = Field(..., description="Drop-off address or landmark.")
    vehicle_type: str = Field(..., description="Requested vehicle category.")
    status: RideRequestStatus = Field(..., description="requested, accepted or cancelled.")
    created_at: datetime = Field(..., description="When the request was created.")


class RideStartDetails(BaseModel):
    start_time: Optional[datetime] = Field(default=None, description="Trip start time; defaults to now.")
    initial_km: Optional[float] = Field(default=None, ge=0, description="Odometer reading at start.")


class RatingSubmit(BaseModel):
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 (worst) to 5 (best).")
    comment: Optional[str] = Field(
        default=None,
        max_length=1000,
        validation_alias=AliasChoices("comment", "comments"),
        description="Optional free-text comment (also accepted as `comments`).",
    )


class RidePublic(BaseModel):
    id: UUID = Field(..., description="Ride id.")
    ride_request_id: UUID = Field(..., description="Ride request this ride was created from.")
    rider_id: UUID = Field(..., description="Rider user id.")
    driver_id: UUID = Field(..., description="Driver user id bound at acceptance.")

    pickup_location: str = Field(..., description="Pickup address or landmark.")
    destination: str = Field(..., description="Drop-off address or landmark.")
    vehicle_type: str = Field(..., description="Vehicle category.")

    status: RideStatus = Field(..., description="Current ride status.")
    fare_cents: Optional[int] = Field(default=None, description="Final fare in cents (set when the ride ends).")
    initial_km: Optional[float] = Field(default=None, description="Odometer reading at start.")

    started_at: Optional[datetime] = Field(default=None, description="When the ride started.")
    ended_at: Optional[datetime] = Field(default=None, description="When the ride ended.")
    created_at: datetime = Field(..., description="When the ride was created.")
    updated_at: datetime = Field(..., description="When the ride was last updated.")


class CancellationPublic(BaseModel):
    """
    Result of a rider cancel: either a ride or a still-pending request was cancelled.
    """

    ride: Optional[RidePublic] = Field(default=None, description="Cancelled ride, if one existed.")
    ride_request: Optional[RideRequestPublic] = Field(
        default=None,
        description="Cancelled ride request, if it had not been accepted yet.",
    )
