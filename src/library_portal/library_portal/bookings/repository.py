from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import BookingStatus
from .model import SeatBooking


class BookingRepository(Protocol):
    def list_for_user(self, user_id: str) -> Sequence[SeatBooking]:
        raise NotImplementedError

    def list_all(self) -> Sequence[SeatBooking]:
        raise NotImplementedError

    def get_by_id(self, booking_id: str) -> Optional[SeatBooking]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: str,
        seat_number: str,
        booking_date: date,
        start_time: time,
        end_time: time,
    ) -> None:
        raise NotImplementedError

    def update_status(self, booking_id: str, status: BookingStatus) -> None:
        raise NotImplementedError
