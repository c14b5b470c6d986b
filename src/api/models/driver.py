import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Numeric, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.api.models.base import Base


class Driver(Base):
    """
    Driver profile created by admin onboarding.

    Notes:
    - Primary key equals the corresponding users.id (1:1 relationship).
    - is_available flips to false while the driver holds an accepted or started
      ride, and back to true when that ride ends or is cancelled.
    """

    __tablename__ = "drivers"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    license_number: Mapped[str] = mapped_column(Text, nullable=False)
    vehicle_number: Mapped[str] = mapped_column(Text, nullable=False)
    vehicle_type: Mapped[str | None] = mapped_column(Text, nullable=True)

    rating: Mapped[float] = mapped_column(Numeric(3, 2), nullable=False, default=5.0)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    user = relationship("User", lazy="joined")
