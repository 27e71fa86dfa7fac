from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import BookingStatus


@dataclass(frozen=True)
class SeatBooking:
    booking_id: str
    user_id: str
    seat_number: str
    booking_date: date
    start_time: time
    end_time: time
    status: BookingStatus
    created_at: Optional[datetime] = None
