"""ORM -> public schema conversions shared by the rider, driver and auth routers."""

from src.api.models.driver import Driver
from src.api.models.ride import Ride, RideRequest
from src.api.models.user import Rider, User
from src.api.schemas.driver import DriverPublic
from src.api.schemas.ride import RidePublic, RideRequestPublic
from src.api.schemas.user import RiderPublic, UserPublic


def user_to_public(user: User) -> UserPublic:
    return UserPublic(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role.value,
        created_at=user.created_at,
    )


def rider_to_public(rider: Rider) -> RiderPublic:
    # rating is Numeric(3,2) -> could be Decimal; cast to float for JSON.
    return RiderPublic(
        id=rider.id,
        name=rider.user.name,
        email=rider.user.email,
        rating=float(rider.rating) if rider.rating is not None else 5.0,
    )


def driver_to_public(d: Driver) -> DriverPublic:
    return DriverPublic(
        id=d.id,
        name=d.user.name,
        email=d.user.email,
        license_number=d.license_number,
        vehicle_number=d.vehicle_number,
        vehicle_type=d.vehicle_type,
        rating=float(d.rating) if d.rating is not None else 5.0,
        is_available=bool(d.is_available),
        updated_at=d.updated_at,
    )


def ride_request_to_public(req: RideRequest) -> RideRequestPublic:
    return RideRequestPublic(
        id=req.id,
        rider_id=req.rider_id,
        pickup_location=req.pickup_location,
        destination=req.destination,
        vehicle_type=req.vehicle_type,
        status=req.status,
        created_at=req.created_at,
    )


def ride_to_public(ride: Ride) -> RidePublic:
    return RidePublic(
        id=ride.id,
        ride_request_id=ride.ride_request_id,
        rider_id=ride.rider_id,
        driver_id=ride.driver_id,
        pickup_location=ride.pickup_location,
        destination=ride.destination,
        vehicle_type=ride.vehicle_type,
        status=ride.status,
        fare_cents=ride.fare_cents,
        initial_km=ride.initial_km,
        started_at=ride.started_at,
        ended_at=ride.ended_at,
        created_at=ride.created_at,
        updated_at=ride.updated_at,
    )
