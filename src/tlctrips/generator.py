"""Module implementing the SyntheticTripSource type."""

from __future__ import annotations

import random
from datetime import timedelta

from .errors import ResolutionError, ValidationError
from .partition.units import millis_to_datetime
from .trips import Trip


class SyntheticTripSource:
    """
    Generates plausible random trips without touching the dataset.

    This class implements the source.TripSource protocol, so it can
    replace `TripQuery` where the network or the dataset is unavailable.
    """

    def __init__(self, rng: random.Random | None = None):
        """
        Parameters:
            rng: Optional random generator (e.g., seeded for tests).
        """
        self.rng = rng if rng is not None else random.Random()

    def generate(self, from_ms: int, n_results: int) -> list[Trip]:
        """
        Return exactly n_results random trips starting around from_ms.

        Pickups fall within [0, 60) seconds after from_ms, dropoffs within
        [300, 3600) seconds after pickup, distances within [0.5, 20.0) and
        fares within [2.5, 100.0).

        Raises:
            ValidationError if n_results is negative.
        """
        if n_results < 0:
            raise ValidationError(f"n_results must be non-negative, got {n_results}")
        start = millis_to_datetime(from_ms)
        trips = []
        for _ in range(n_results):
            try:
                pickup_time = start + timedelta(milliseconds=self.rng.randrange(0, 60_000))
                dropoff_time = pickup_time + timedelta(
                    milliseconds=self.rng.randrange(300_000, 3_600_000)
                )
            except OverflowError as exc:
                raise ResolutionError(f"timestamp out of range: {from_ms}ms") from exc
            trips.append(
                Trip(
                    pickup_time=pickup_time,
                    dropoff_time=dropoff_time,
                    distance=0.5 + 19.5 * self.rng.random(),
                    fare=2.5 + 97.5 * self.rng.random(),
                )
            )
        trips.sort(key=lambda trip: trip.pickup_time)
        return trips

    def get_trips(self, from_ms: int, n_results: int) -> list[Trip]:
        return self.generate(from_ms, n_results)
