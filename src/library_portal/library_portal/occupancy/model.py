from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from ..common.datetime_utils import round_half_up
from ..core.exceptions import BackendError


@dataclass(frozen=True)
class OccupancySnapshot:
    """Server-computed library aggregate; ``available`` is taken as reported."""

    current_occupied: int
    total_seats: int
    available: int

    @property
    def percent(self) -> int:
        if self.total_seats <= 0:
            return 0
        return min(100, int(round_half_up(self.current_occupied / self.total_seats * 100)))

    def to_dict(self) -> Dict[str, int]:
        return {
            "current_occupied": self.current_occupied,
            "total_seats": self.total_seats,
            "available": self.available,
            "percent": self.percent,
        }


@dataclass(frozen=True)
class SeatSummary:
    """Admin seat counter: capacity from settings, occupied = open records today."""

    total_seats: int
    occupied: int

    @property
    def available(self) -> int:
        return max(0, self.total_seats - self.occupied)


def decode_status(data: Any) -> OccupancySnapshot:
    """Normalize the aggregate procedure result, which is one row or one object."""

    row: Any
    if isinstance(data, list):
        if not data:
            raise BackendError("Library status is unavailable")
        row = data[0]
    else:
        row = data
    if not isinstance(row, Mapping):
        raise BackendError("Library status is unavailable")
    try:
        return OccupancySnapshot(
            current_occupied=int(row.get("current_occupied") or 0),
            total_seats=int(row.get("total_seats") or 0),
            available=int(row.get("available") or 0),
        )
    except (TypeError, ValueError):
        raise BackendError("Library status is malformed")
