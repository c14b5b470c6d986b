"""
Post-ride ratings.

Each ended ride can receive one rating per direction. After a rating is stored,
the rated participant's aggregate is recomputed as the mean of every rating
they have received.
"""

from __future__ import annotations

import logging
from typing import Optional, Union
from uuid import UUID, uuid4

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.api.errors import Conflict, Forbidden, InvalidState, NotFound, ValidationError
from src.api.models.driver import Driver
from src.api.models.rating import Rating, RatingDirection
from src.api.models.ride import Ride, RideStatus
from src.api.models.user import Rider, User

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def submit_rating(
    db: Session,
    rater: User,
    ride_id: UUID,
    *,
    direction: RatingDirection,
    rating: int,
    comment: Optional[str] = None,
) -> Union[Rider, Driver]:
    """
    Record a rating and return the updated profile of the rated participant.

    Raises:
        ValidationError: rating outside [1, 5].
        NotFound: ride (or the rated profile) does not exist.
        Forbidden: caller is not the participant entitled to this direction.
        InvalidState: ride has not ended.
        Conflict: this direction was already rated for the ride.
    """
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}.")

    ride = db.scalar(select(Ride).where(Ride.id == ride_id))
    if not ride:
        raise NotFound("Ride not found.")

    if direction == RatingDirection.driver_to_rider:
        rater_id, ratee_id, profile_model = ride.driver_id, ride.rider_id, Rider
    else:
        rater_id, ratee_id, profile_model = ride.rider_id, ride.driver_id, Driver

    if rater.id != rater_id:
        raise Forbidden("Only a participant of this ride can rate it.")
    if ride.status != RideStatus.ended:
        raise InvalidState("Ratings are only accepted once the ride has ended.")

    existing = db.scalar(
        select(Rating.id).where(Rating.ride_id == ride.id, Rating.direction == direction)
    )
    if existing:
        raise Conflict("This ride has already been rated.")

    db.add(
        Rating(
            id=uuid4(),
            ride_id=ride.id,
            direction=direction,
            ratee_id=ratee_id,
            rating=rating,
            comment=comment.strip() if comment else None,
        )
    )
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise Conflict("This ride has already been rated.")

    profile = db.scalar(select(profile_model).where(profile_model.id == ratee_id))
    if not profile:
        db.rollback()
        raise NotFound(f"{profile_model.__name__} not found.")

    # Rider and driver ratings of the same user are kept apart.
    average = db.scalar(
        select(func.avg(Rating.rating)).where(Rating.ratee_id == ratee_id, Rating.direction == direction)
    )
    profile.rating = round(float(average), 2)
    db.commit()
    db.refresh(profile)
    logger.info("User %s rated ride %s (%s) with %s", rater.id, ride.id, direction.value, rating)
    return profile
