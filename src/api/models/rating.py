import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, Text, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from src.api.models.base import Base


class RatingDirection(str, enum.Enum):
    """Which participant is being rated by which."""
    rider_to_driver = "rider_to_driver"
    driver_to_rider = "driver_to_rider"


class Rating(Base):
    """
    One rating per (ride, direction); the two directions are independent rows.
    """

    __tablename__ = "ratings"
    __table_args__ = (UniqueConstraint("ride_id", "direction", name="uq_ratings_ride_direction"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    ride_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("rides.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    direction: Mapped[RatingDirection] = mapped_column(
        Enum(RatingDirection, name="rating_direction"),
        nullable=False,
    )
    # The user receiving the rating; used to recompute their aggregate.
    ratee_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
