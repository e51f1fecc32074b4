"""Module defining the TripSource capability."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .trips import Trip


@runtime_checkable
class TripSource(Protocol):
    """
    Anything able to answer "N trips at or after T".

    Implemented by `TripQuery`, which reads the real dataset, and by
    `SyntheticTripSource`, which makes trips up.

    Methods:
        get_trips: return at most n_results trips ordered by pickup time.
    """

    def get_trips(self, from_ms: int, n_results: int) -> list[Trip]: ...
