from __future__ import annotations

import logging
from datetime import date, time
from typing import Dict, List, Optional, Sequence

from ..common.datetime_utils import parse_clock, parse_iso_date
from ..common.validators import require_non_empty, require_text, require_time_order
from ..core.enums import BookingStatus
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.repository import ProfileRepository
from .model import SeatBooking
from .repository import BookingRepository

logger = logging.getLogger(__name__)

DEFAULT_START = time(9, 0)
DEFAULT_END = time(17, 0)

# Admin decisions only apply to pending requests.
_ADMIN_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
}


def booking_to_dict(b: SeatBooking, *, owner: Optional[Dict[str, str]] = None) -> Dict[str, object]:
    row: Dict[str, object] = {
        "id": b.booking_id,
        "user_id": b.user_id,
        "seat_number": b.seat_number,
        "booking_date": b.booking_date.isoformat(),
        "start_time": b.start_time.strftime("%H:%M"),
        "end_time": b.end_time.strftime("%H:%M"),
        "status": b.status.value,
        "cancellable": b.status != BookingStatus.CANCELLED,
    }
    if owner is not None:
        row["profiles"] = owner
    return row


class BookingService:
    def __init__(self, bookings: BookingRepository, profiles: ProfileRepository):
        self._bookings = bookings
        self._profiles = profiles

    def create(
        self,
        user_id: str,
        *,
        seat_number: Optional[str],
        booking_date: Optional[str],
        start_time: Optional[str],
        end_time: Optional[str],
        today: date,
    ) -> str:
        """Book a seat; returns the seat number as stored.

        Only the seat is required. A missing date, start or end falls back to
        the booking form's initial values: ``today``, 09:00 and 17:00.
        """

        seat =require_non_empty(None if seat_number is None else str(seat_number), "Seat number")
        require_text(booking_date, "Booking date")
        require_text(start_time, "Start time")
        require_text(end_time, "End time")
        try:
            day = parse_iso_date(booking_date) if booking_date else today
            start = parse_clock(start_time) if start_time else DEFAULT_START
            end = parse_clock(end_time) if end_time else DEFAULT_END
        except (TypeError, ValueError):
            raise ValidationError("Invalid booking date or time")
        require_time_order(start, end, "Booking")

        self._bookings.create(user_id=user_id, seat_number=seat, booking_date=day, start_time=start, end_time=end)
        logger.info("seat %s booked by %s for %s", seat, user_id, day.isoformat())
        return seat

    def list_for_user(self, user_id: str) -> Sequence[SeatBooking]:
        return self._bookings.list_for_user(user_id)

    def cancel_own(self, user_id: str, booking_id: str) -> None:
        booking = self._bookings.get_by_id(booking_id)
        if booking is None:
            raise ValidationError("Booking not found")
        if booking.user_id != user_id:
            raise AuthorizationError("You can only cancel your own bookings")
        self._bookings.update_status(booking_id, BookingStatus.CANCELLED)

    def list_all_with_owners(self) -> List[Dict[str, object]]:
        bookings = self._bookings.list_all()
        owners = {p.user_id: p for p in self._profiles.list_by_ids(b.user_id for b in bookings)}
        out = []
        for b in bookings:
            p = owners.get(b.user_id)
            out.append(booking_to_dict(b, owner={"full_name": p.full_name if p else "Unknown", "email": p.email if p else ""}))
        return out

    def set_status(self, booking_id: str, status: str) -> BookingStatus:
        try:
            new_status = BookingStatus(status)
        except ValueError:
            raise ValidationError("Invalid booking status")

        booking = self._bookings.get_by_id(booking_id)
        if booking is None:
            raise ValidationError("Booking not found")
        if new_status not in _ADMIN_TRANSITIONS.get(booking.status, set()):
            raise ValidationError(f"Cannot change a {booking.status.value} booking to {new_status.value}")

        self._bookings.update_status(booking_id, new_status)
        return new_status
