import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Numeric, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.api.models.base import Base


class UserRole(str, enum.Enum):
    """User roles supported by the application."""
    rider = "rider"
    driver = "driver"
    admin = "admin"


class User(Base):
    """
    Account row shared by riders, drivers and admins.

    Signup always creates a rider; admin onboarding upgrades the role to driver.
    """
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole, name="user_role"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class Rider(Base):
    """Rider profile; primary key equals users.id (1:1)."""

    __tablename__ = "riders"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    rating: Mapped[float] = mapped_column(Numeric(3, 2), nullable=False, default=5.0)

    user = relationship("User", lazy="joined")
