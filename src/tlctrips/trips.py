"""Module defining the Trip record."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True, kw_only=True)
class Trip:
    """
    A single taxi trip.

    Attributes:
        pickup_time: UTC-aware pickup instant.
        dropoff_time: UTC-aware dropoff instant, never before pickup_time.
        distance: trip distance in miles, non-negative.
        fare: fare amount in USD, passed through as-is.
    """

    pickup_time: datetime
    dropoff_time: datetime
    distance: float
    fare: float

    def __post_init__(self):
        if self.pickup_time.tzinfo is None or self.dropoff_time.tzinfo is None:
            raise ValueError("trip timestamps must be timezone-aware")
        if self.pickup_time > self.dropoff_time:
            raise ValueError(
                f"pickup_time {self.pickup_time} is after dropoff_time {self.dropoff_time}"
            )
        if self.distance < 0:
            raise ValueError(f"distance must be non-negative, got {self.distance}")

    def to_dict(self) -> dict[str, str | float]:
        """Convert to the JSON-friendly dict returned by the API."""
        return {
            "pickup_time": format_timestamp(self.pickup_time),
            "dropoff_time": format_timestamp(self.dropoff_time),
            "distance": float(self.distance),
            "fare": float(self.fare),
        }


def format_timestamp(value: datetime) -> str:
    """Format an aware datetime as RFC3339 in UTC with the Z suffix."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
