"""
Core ride lifecycle operations.

A ride moves requested -> accepted -> started -> ended, and may be cancelled
from requested, accepted or started. "requested" lives on the RideRequest row;
the remaining states live on the Ride row created when a driver accepts.

Every transition is written as a compare-and-set (`UPDATE ... WHERE status =
<expected>`). If the row count is not 1 another request changed the row first,
and the caller gets a Conflict instead of a silent success.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union
from uuid import UUID, uuid4

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.api.errors import Conflict, Forbidden, InvalidState, NotFound, ValidationError
from src.api.models.driver import Driver
from src.api.models.ride import Ride, RideRequest, RideRequestStatus, RideStatus
from src.api.models.user import User
from src.api.services.fares import FareCalculator

logger = logging.getLogger(__name__)

# Allowed Ride transitions; requested -> accepted is handled on RideRequest.
RIDE_TRANSITIONS: Dict[RideStatus, set[RideStatus]] = {
    RideStatus.accepted: {RideStatus.started, RideStatus.cancelled},
    RideStatus.started: {RideStatus.ended, RideStatus.cancelled},
    RideStatus.ended: set(),
    RideStatus.cancelled: set(),
}


def _utcnow() -> datetime:
    """Return an aware UTC timestamp."""
    return datetime.now(timezone.utc)


def _get_ride(db: Session, ride_id: UUID) -> Ride:
    ride = db.scalar(select(Ride).where(Ride.id == ride_id))
    if not ride:
        raise NotFound("Ride not found.")
    return ride


def _ensure_ride_driver(driver_user: User, ride: Ride) -> None:
    if ride.driver_id != driver_user.id:
        raise Forbidden("This ride is not assigned to the current driver.")


def _set_driver_available(db: Session, driver_id: UUID, available: bool) -> int:
    """Flip availability only if it currently holds the opposite value; returns rowcount."""
    result = db.execute(
        update(Driver)
        .where(Driver.id == driver_id, Driver.is_available.is_(not available))
        .values(is_available=available, updated_at=_utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


def _transition(db: Session, ride: Ride, target: RideStatus, **values: Any) -> None:
    """
    Move `ride` to `target` if allowed from its current status.

    Raises:
        InvalidState: if the current status does not allow `target`.
        Conflict: if the row changed status between the read and the write.
    """
    current = ride.status
    if target not in RIDE_TRANSITIONS[current]:
        raise InvalidState(f"Cannot move ride from '{current.value}' to '{target.value}'.")

    result = db.execute(
        update(Ride)
        .where(Ride.id == ride.id, Ride.status == current)
        .values(status=target, updated_at=_utcnow(), **values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        raise Conflict("Ride was modified by another request; reload and retry.")


def request_ride(
    db: Session,
    rider: User,
    *,
    pickup_location: Optional[str],
    destination: Optional[str],
    vehicle_type: Optional[str],
) -> RideRequest:
    """
    Create a ride request in status=requested.

    Raises:
        ValidationError: if pickup, destination or vehicle type is missing.
    """
    fields = {
        "pickup_location": pickup_location,
        "destination": destination,
        "vehicle_type": vehicle_type,
    }
    missing = [name for name, value in fields.items() if value is None or not value.strip()]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}.")

    ride_request = RideRequest(
        id=uuid4(),
        rider_id=rider.id,
        pickup_location=pickup_location.strip(),
        destination=destination.strip(),
        vehicle_type=vehicle_type.strip(),
        status=RideRequestStatus.requested,
    )
    db.add(ride_request)
    db.commit()
    db.refresh(ride_request)
    logger.info("Rider %s requested ride %s", rider.id, ride_request.id)
    return ride_request


def accept_ride(db: Session, driver_user: User, ride_request_id: UUID) -> Ride:
    """
    Accept a pending ride request and create the ride bound to this driver.

    Exactly one driver can win a request: both the driver's availability and
    the request status are claimed with compare-and-set updates in the same
    transaction.

    Raises:
        NotFound: if the request or the driver profile does not exist.
        Forbidden: if the driver is the rider who made the request.
        Conflict: if the request was already accepted, or the driver is busy.
        InvalidState: if the request was cancelled.
    """
    ride_request = db.scalar(select(RideRequest).where(RideRequest.id == ride_request_id))
    if not ride_request:
        raise NotFound("Ride request not found.")
    if ride_request.rider_id == driver_user.id:
        raise Forbidden("Drivers cannot accept their own ride request.")
    _ensure_request_pending(ride_request.status)

    driver = db.scalar(select(Driver).where(Driver.id == driver_user.id))
    if not driver:
        raise NotFound("Driver profile not found.")

    if _set_driver_available(db, driver.id, False) != 1:
        db.rollback()
        raise Conflict("Driver is not available to accept a new ride.")

    claimed = db.execute(
        update(RideRequest)
        .where(
            RideRequest.id == ride_request_id,
            RideRequest.status == RideRequestStatus.requested,
        )
        .values(status=RideRequestStatus.accepted)
        .execution_options(synchronize_session=False)
    )
    if claimed.rowcount != 1:
        db.rollback()
        latest = db.scalar(select(RideRequest.status).where(RideRequest.id == ride_request_id))
        _ensure_request_pending(latest)
        raise Conflict("Ride request was already accepted.")

    now = _utcnow()
    ride = Ride(
        id=uuid4(),
        ride_request_id=ride_request.id,
        rider_id=ride_request.rider_id,
        driver_id=driver_user.id,
        pickup_location=ride_request.pickup_location,
        destination=ride_request.destination,
        vehicle_type=ride_request.vehicle_type,
        status=RideStatus.accepted,
        updated_at=now,
    )
    db.add(ride)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Ride request was already accepted.")
    db.refresh(ride)
    logger.info("Driver %s accepted request %s as ride %s", driver_user.id, ride_request_id, ride.id)
    return ride


def _ensure_request_pending(current: Optional[RideRequestStatus]) -> None:
    if current == RideRequestStatus.accepted:
        raise Conflict("Ride request was already accepted.")
    if current == RideRequestStatus.cancelled:
        raise InvalidState("Ride request was cancelled.")


def start_ride(
    db: Session,
    driver_user: User,
    ride_id: UUID,
    *,
    start_time: Optional[datetime] = None,
    initial_km: Optional[float] = None,
) -> Ride:
    """
    Start an accepted ride (owning driver only).

    Raises:
        NotFound, Forbidden, InvalidState, ValidationError (negative odometer).
    """
    if initial_km is not None and initial_km < 0:
        raise ValidationError("initial_km must be >= 0.")

    ride = _get_ride(db, ride_id)
    _ensure_ride_driver(driver_user, ride)
    _transition(
        db,
        ride,
        RideStatus.started,
        started_at=start_time or _utcnow(),
        initial_km=initial_km,
    )
    db.commit()
    db.refresh(ride)
    logger.info("Driver %s started ride %s", driver_user.id, ride.id)
    return ride


def end_ride(db: Session, driver_user: User, ride_id: UUID, fare_calculator: FareCalculator) -> Ride:
    """
    End a started ride, price it and free the driver.

    Raises:
        NotFound, Forbidden, InvalidState.
    """
    ride = _get_ride(db, ride_id)
    _ensure_ride_driver(driver_user, ride)
    if RideStatus.ended not in RIDE_TRANSITIONS[ride.status]:
        raise InvalidState(f"Cannot move ride from '{ride.status.value}' to '{RideStatus.ended.value}'.")

    fare_cents = fare_calculator.calculate_fare(ride)
    _transition(db, ride, RideStatus.ended, ended_at=_utcnow(), fare_cents=fare_cents)
    _set_driver_available(db, ride.driver_id, True)
    db.commit()
    db.refresh(ride)
    logger.info("Driver %s ended ride %s (fare_cents=%s)", driver_user.id, ride.id, fare_cents)
    return ride


def cancel_ride_by_driver(db: Session, driver_user: User, ride_id: UUID) -> Ride:
    """
    Cancel an accepted or started ride assigned to this driver.

    Raises:
        NotFound, Forbidden, InvalidState (already ended/cancelled).
    """
    ride = _get_ride(db, ride_id)
    _ensure_ride_driver(driver_user, ride)
    _cancel(db, ride)
    logger.info("Driver %s cancelled ride %s", driver_user.id, ride.id)
    return ride


def cancel_ride_by_rider(db: Session, rider: User, ride_id: UUID) -> Union[Ride, RideRequest]:
    """
    Cancel the rider's own ride, or their own request if nobody accepted it yet.

    `ride_id` may be either a ride id or a ride request id.

    Raises:
        NotFound: if neither a ride nor a request has this id.
        Forbidden: if it belongs to another rider.
        InvalidState: if already ended/cancelled, or the request was accepted
            (cancel the ride instead).
    """
    ride = db.scalar(select(Ride).where(Ride.id == ride_id))
    if ride:
        if ride.rider_id != rider.id:
            raise Forbidden("You do not have access to this ride.")
        _cancel(db, ride)
        logger.info("Rider %s cancelled ride %s", rider.id, ride.id)
        return ride

    ride_request = db.scalar(select(RideRequest).where(RideRequest.id == ride_id))
    if not ride_request:
        raise NotFound("Ride not found.")
    if ride_request.rider_id != rider.id:
        raise Forbidden("You do not have access to this ride.")
    if ride_request.status == RideRequestStatus.accepted:
        raise InvalidState("Ride request was already accepted; cancel the ride instead.")
    if ride_request.status == RideRequestStatus.cancelled:
        raise InvalidState("Ride request is already cancelled.")

    result = db.execute(
        update(RideRequest)
        .where(
            RideRequest.id == ride_request.id,
            RideRequest.status == RideRequestStatus.requested,
        )
        .values(status=RideRequestStatus.cancelled)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        raise Conflict("Ride request was modified by another request; reload and retry.")
    db.commit()
    db.refresh(ride_request)
    logger.info("Rider %s cancelled ride request %s", rider.id, ride_request.id)
    return ride_request


def _cancel(db: Session, ride: Ride) -> None:
    _transition(db, ride, RideStatus.cancelled)
    _set_driver_available(db, ride.driver_id, True)
    db.commit()
    db.refresh(ride)

