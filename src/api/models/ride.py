from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Index, Integer, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.api.models.base import Base


class RideRequestStatus(str, enum.Enum):
    """Status of a rider's solicitation before a driver picks it up."""

    requested = "requested"
    accepted = "accepted"
    cancelled = "cancelled"


class RideStatus(str, enum.Enum):
    """
    Ride status values.

    Flow: accepted -> started -> ended, with cancelled reachable from
    accepted or started.
    """

    accepted = "accepted"
    started = "started"
    ended = "ended"
    cancelled = "cancelled"


class RideRequest(Base):
    __tablename__ = "ride_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    rider_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    pickup_location: Mapped[str] = mapped_column(Text, nullable=False)
    destination: Mapped[str] = mapped_column(Text, nullable=False)
    vehicle_type: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[RideRequestStatus] = mapped_column(
        Enum(RideRequestStatus, name="ride_request_status"),
        nullable=False,
        default=RideRequestStatus.requested,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    rider = relationship("User", foreign_keys=[rider_id], lazy="joined")


class Ride(Base):
    """
    A ride request bound to the driver who accepted it.

    ride_request_id is unique so a request can only ever produce one ride.
    """

    __tablename__ = "rides"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    ride_request_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("ride_requests.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
    )
    rider_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    driver_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    pickup_location: Mapped[str] = mapped_column(Text, nullable=False)
    destination: Mapped[str] = mapped_column(Text, nullable=False)
    vehicle_type: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[RideStatus] = mapped_column(
        Enum(RideStatus, name="ride_status"),
        nullable=False,
        default=RideStatus.accepted,
        index=True,
    )

    fare_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)
    initial_km: Mapped[float | None] = mapped_column(Float, nullable=True)

    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    rider = relationship("User", foreign_keys=[rider_id], lazy="joined")
    driver = relationship("User", foreign_keys=[driver_id], lazy="joined")


# Extra composite indexes to support ride history queries.
Index("idx_rides_rider_created_at", Ride.rider_id, Ride.created_at)
Index("idx_rides_driver_created_at", Ride.driver_id, Ride.created_at)
