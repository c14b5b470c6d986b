from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.api.db import get_db
from src.api.deps import require_rider
from src.api.errors import error_responses
from src.api.models.rating import RatingDirection
from src.api.models.ride import Ride
from src.api.models.user import User
from src.api.routers.common import driver_to_public, ride_request_to_public, ride_to_public, rider_to_public
from src.api.schemas.driver import DriverPublic
from src.api.schemas.ride import CancellationPublic, RatingSubmit, RidePublic, RideRequestCreate, RideRequestPublic
from src.api.schemas.user import RiderPublic
from src.api.services import profiles, ratings, ride_lifecycle

# Every route below is rider-only; the role check runs before the handler.
router = APIRouter(
    prefix="/rider",
    tags=["rider"],
    dependencies=[Depends(require_rider)],
    responses=error_responses(401, 403),
)


@router.get(
    "/getMyProfile",
    response_model=RiderPublic,
    summary="Get rider profile",
    description="Return the authenticated rider's profile and rating.",
    operation_id="rider_get_my_profile",
    responses=error_responses(404),
)
def get_my_profile(
    current_user: User = Depends(require_rider),
    db: Session = Depends(get_db),
) -> RiderPublic:
    return rider_to_public(profiles.get_rider_profile(db, current_user))


@router.get(
    "/getMyRides",
    response_model=List[RidePublic],
    summary="Get rider's ride history (paginated)",
    description=f"Rides taken by the current rider, {profiles.PAGE_SIZE} per page, ascending by sortBy.",
    operation_id="rider_get_my_rides",
    responses=error_responses(400),
)
def get_my_rides(
    sort_by: str = Query(default="id", alias="sortBy", description="Field to sort rides by."),
    page_number: int = Query(default=0, alias="pageNumber", ge=0, description="Page number (from 0)."),
    current_user: User = Depends(require_rider),
    db: Session = Depends(get_db),
) -> List[RidePublic]:
    rides = profiles.list_my_rides(db, current_user.id, as_driver=False, sort_by=sort_by, page_number=page_number)
    return [ride_to_public(r) for r in rides]


@router.post(
    "/requestRide",
    response_model=RideRequestPublic,
    summary="Request a ride",
    description="Create a ride request (pickup, destination, vehicle type) awaiting driver acceptance.",
    operation_id="rider_request_ride",
    responses=error_responses(400),
)
def request_ride(
    payload: RideRequestCreate,
    current_user: User = Depends(require_rider),
    db: Session = Depends(get_db),
) -> RideRequestPublic:
    ride_request = ride_lifecycle.request_ride(
        db,
        current_user,
        pickup_location=payload.pickup_location,
        destination=payload.destination,
        vehicle_type=payload.vehicle_type,
    )
    return ride_request_to_public(ride_request)


@router.post(
    "/cancelRide/{ride_id}",
    response_model=CancellationPublic,
    summary="Cancel a ride",
    description=(
        "Cancel the rider's ride (accepted or started) or, when given a ride request id, "
        "the still-pending request."
    ),
    operation_id="rider_cancel_ride",
    responses=error_responses(404, 409),
)
def cancel_ride(
    ride_id: UUID,
    current_user: User = Depends(require_rider),
    db: Session = Depends(get_db),
) -> CancellationPublic:
    cancelled = ride_lifecycle.cancel_ride_by_rider(db, current_user, ride_id)
    if isinstance(cancelled, Ride):
        return CancellationPublic(ride=ride_to_public(cancelled))
    return CancellationPublic(ride_request=ride_request_to_public(cancelled))


@router.post(
    "/rateDriver/{ride_id}",
    response_model=DriverPublic,
    summary="Rate a driver",
    description="Rate the driver of an ended ride (1-5, optional comment). One rating per ride.",
    operation_id="rider_rate_driver",
    responses=error_responses(400, 404, 409),
)
def rate_driver(
    ride_id: UUID,
    payload: RatingSubmit,
    current_user: User = Depends(require_rider),
    db: Session = Depends(get_db),
) -> DriverPublic:
    driver = ratings.submit_rating(
        db,
        current_user,
        ride_id,
        direction=RatingDirection.rider_to_driver,
        rating=payload.rating,
        comment=payload.comment,
    )
    return driver_to_public(driver)
