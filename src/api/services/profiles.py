"""
Read-only access to the caller's own profile and ride history.
"""

from __future__ import annotations

from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.errors import NotFound, ValidationError
from src.api.models.driver import Driver
from src.api.models.ride import Ride
from src.api.models.user import Rider, User

PAGE_SIZE = 4

# Only these columns may be used for ordering; user input never reaches SQL directly.
SORTABLE_FIELDS = {
    "id": Ride.id,
    "created_at": Ride.created_at,
    "updated_at": Ride.updated_at,
    "status": Ride.status,
    "fare_cents": Ride.fare_cents,
    "started_at": Ride.started_at,
    "ended_at": Ride.ended_at,
}


def get_rider_profile(db: Session, user: User) -> Rider:
    rider = db.scalar(select(Rider).where(Rider.id == user.id))
    if not rider:
        raise NotFound("Rider profile not found.")
    return rider


def get_driver_profile(db: Session, user: User) -> Driver:
    driver = db.scalar(select(Driver).where(Driver.id == user.id))
    if not driver:
        raise NotFound("Driver profile not found.")
    return driver


def list_my_rides(
    db: Session,
    user_id: UUID,
    *,
    as_driver: bool,
    sort_by: str = "id",
    page_number: int = 0,
) -> List[Ride]:
    """
    Return one page (PAGE_SIZE items) of the caller's rides, ascending by sort_by.

    as_driver selects rides the user drove; otherwise rides the user took as rider.

    Raises:
        ValidationError: unknown sort field or negative page number.
    """
    column = SORTABLE_FIELDS.get(sort_by)
    if column is None:
        allowed = ", ".join(sorted(SORTABLE_FIELDS))
        raise ValidationError(f"Invalid sortBy '{sort_by}'. Allowed: {allowed}.")
    if page_number < 0:
        raise ValidationError("pageNumber must be >= 0.")

    owner = Ride.driver_id if as_driver else Ride.rider_id
    stmt = (
        select(Ride)
        .where(owner == user_id)
        # id as tiebreaker keeps pages stable when sort values repeat.
        .order_by(column.asc(), Ride.id.asc())
        .limit(PAGE_SIZE)
        .offset(page_number * PAGE_SIZE)
    )
    return list(db.scalars(stmt).unique().all())
