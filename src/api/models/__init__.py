from src.api.models.driver import Driver
from src.api.models.rating import Rating, RatingDirection
from src.api.models.ride import Ride, RideRequest, RideRequestStatus, RideStatus
from src.api.models.user import Rider, User, UserRole

__all__ = [
    "Driver",
    "Rating",
    "RatingDirection",
    "Ride",
    "RideRequest",
    "RideRequestStatus",
    "RideStatus",
    "Rider",
    "User",
    "UserRole",
]
