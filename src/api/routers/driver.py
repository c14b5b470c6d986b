from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from src.api.db import get_db
from src.api.deps import require_driver
from src.api.errors import error_responses
from src.api.models.rating import RatingDirection
from src.api.models.user import User
from src.api.routers.common import driver_to_public, ride_to_public, rider_to_public
from src.api.schemas.driver import DriverPublic
from src.api.schemas.ride import RatingSubmit, RidePublic, RideStartDetails
from src.api.schemas.user import RiderPublic
from src.api.services import profiles, ratings, ride_lifecycle
from src.api.services.fares import FareCalculator, get_fare_calculator

# Every route below is driver-only; the role check runs before the handler.
router = APIRouter(
    prefix="/driver",
    tags=["driver"],
    dependencies=[Depends(require_driver)],
    responses=error_responses(401, 403),
)


@router.get(
    "/getMyProfile",
    response_model=DriverPublic,
    summary="Get driver profile",
    description="Return the authenticated driver's profile: vehicle, rating and availability.",
    operation_id="driver_get_my_profile",
    responses=error_responses(404),
)
def get_my_profile(
    current_user: User = Depends(require_driver),
    db: Session = Depends(get_db),
) -> DriverPublic:
    return driver_to_public(profiles.get_driver_profile(db, current_user))


@router.get(
    "/getMyRides",
    response_model=List[RidePublic],
    summary="Get driver's ride history (paginated)",
    description=f"Rides driven by the current driver, {profiles.PAGE_SIZE} per page, ascending by sortBy.",
    operation_id="driver_get_my_rides",
    responses=error_responses(400),
)
def get_my_rides(
    sort_by: str = Query(default="id", alias="sortBy", description="Field to sort rides by."),
    page_number: int = Query(default=0, alias="pageNumber", ge=0, description="Page number (from 0)."),
    current_user: User = Depends(require_driver),
    db: Session = Depends(get_db),
) -> List[RidePublic]:
    rides = profiles.list_my_rides(db, current_user.id, as_driver=True, sort_by=sort_by, page_number=page_number)
    return [ride_to_public(r) for r in rides]


@router.post(
    "/acceptRide/{ride_request_id}",
    response_model=RidePublic,
    summary="Accept a ride request",
    description="Accept a pending ride request. Only one driver can win a request.",
    operation_id="driver_accept_ride",
    responses=error_responses(404, 409),
)
def accept_ride(
    ride_request_id: UUID,
    current_user: User = Depends(require_driver),
    db: Session = Depends(get_db),
) -> RidePublic:
    """
    Accept a ride request.

    Errors:
    - 404 if the request does not exist
    - 403 if the request was made by the driver themselves
    - 409 if it was already accepted or cancelled, or the driver is on another ride
    """
    return ride_to_public(ride_lifecycle.accept_ride(db, current_user, ride_request_id))


@router.post(
    "/startRide/{ride_id}",
    response_model=RidePublic,
    summary="Start a ride",
    description="Mark an accepted ride as started. Start details (start_time, initial_km) are optional.",
    operation_id="driver_start_ride",
    responses=error_responses(400, 404, 409),
)
def start_ride(
    ride_id: UUID,
    details: Optional[RideStartDetails] = Body(default=None),
    current_user: User = Depends(require_driver),
    db: Session = Depends(get_db),
) -> RidePublic:
    ride = ride_lifecycle.start_ride(
        db,
        current_user,
        ride_id,
        start_time=details.start_time if details else None,
        initial_km=details.initial_km if details else None,
    )
    return ride_to_public(ride)


@router.post(
    "/endRide/{ride_id}",
    response_model=RidePublic,
    summary="End a ride",
    description="Mark a started ride as ended; the fare is computed and the driver becomes available.",
    operation_id="driver_end_ride",
    responses=error_responses(404, 409),
)
def end_ride(
    ride_id: UUID,
    current_user: User = Depends(require_driver),
    db: Session = Depends(get_db),
    fare_calculator: FareCalculator = Depends(get_fare_calculator),
) -> RidePublic:
    return ride_to_public(ride_lifecycle.end_ride(db, current_user, ride_id, fare_calculator))


@router.post(
    "/cancelRide/{ride_id}",
    response_model=RidePublic,
    summary="Cancel a ride",
    description="Cancel an accepted or started ride assigned to the current driver.",
    operation_id="driver_cancel_ride",
    responses=error_responses(404, 409),
)
def cancel_ride(
    ride_id: UUID,
    current_user: User = Depends(require_driver),
    db: Session = Depends(get_db),
) -> RidePublic:
    return ride_to_public(ride_lifecycle.cancel_ride_by_driver(db, current_user, ride_id))


@router.post(
    "/rateRider/{ride_id}",
    response_model=RiderPublic,
    summary="Rate the rider",
    description="Rate the rider of an ended ride (1-5, optional comment). One rating per ride.",
    operation_id="driver_rate_rider",
    responses=error_responses(400, 404, 409),
)
def rate_rider(
    ride_id: UUID,
    payload: RatingSubmit,
    current_user: User = Depends(require_driver),
    db: Session = Depends(get_db),
) -> RiderPublic:
    rider = ratings.submit_rating(
        db,
        current_user,
        ride_id,
        direction=RatingDirection.driver_to_rider,
        rating=payload.rating,
        comment=payload.comment,
    )
    return rider_to_public(rider)
