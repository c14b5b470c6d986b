"""
Fare calculation collaborator.

The lifecycle only needs "something that prices a finished ride"; the pricing
model itself lives behind this interface. The default is a flat fare taken
from BASE_FARE_CENTS. Deployments or tests swap it by overriding the
`get_fare_calculator` dependency.
"""

from __future__ import annotations

from typing import Protocol

from src.api.config import BASE_FARE_CENTS
from src.api.models.ride import Ride


class FareCalculator(Protocol):
    def calculate_fare(self, ride: Ride) -> int:
        """Return the fare for an ended ride, in cents."""
        ...


class FlatFareCalculator:
    """Charges the same configured amount for every ride."""

    def __init__(self, base_fare_cents: int = BASE_FARE_CENTS):
        if base_fare_cents < 0:
            raise ValueError("base_fare_cents must be non-negative")
        self.base_fare_cents = base_fare_cents

    def calculate_fare(self, ride: Ride) -> int:
        return self.base_fare_cents


# PUBLIC_INTERFACE
def get_fare_calculator() -> FareCalculator:
    """FastAPI dependency returning the active fare calculator."""
    return FlatFareCalculator()
