from __future__ import annotations

from datetime import date, time, tzinfo
from typing import Any, Dict, Optional, Sequence

from ..backend.base import backend_client, fetchall, fetchone
from ..backend.connection import BackendConnection
from ..common.datetime_utils import parse_clock, parse_iso_date, parse_timestamp
from ..core.enums import BookingStatus
from .model import SeatBooking
from .repository import BookingRepository

_COLUMNS = "id, user_id, seat_number, booking_date, start_time, end_time, status, created_at"


class SupabaseBookingRepository(BookingRepository):
    def __init__(self, conn_factory: BackendConnection, tz: tzinfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def _to_booking(self, row: Dict[str, Any]) -> SeatBooking:
        return SeatBooking(
            booking_id=str(row["id"]),
            user_id=str(row["user_id"]),
            seat_number=str(row.get("seat_number") or ""),
            booking_date=parse_iso_date(row["booking_date"]),
            start_time=parse_clock(row["start_time"]),
            end_time=parse_clock(row["end_time"]),
            status=BookingStatus(row.get("status") or BookingStatus.PENDING.value),
            created_at=parse_timestamp(row.get("created_at"), self._tz),
        )

    def list_for_user(self, user_id: str) -> Sequence[SeatBooking]:
        with backend_client(self._conn_factory, action="seat_bookings.list_for_user") as client:
            response = (
                client.table("seat_bookings")
                .select(_COLUMNS)
                .eq("user_id", user_id)
                .order("booking_date", desc=True)
                .execute()
            )
            return [self._to_booking(r) for r in fetchall(response)]

    def list_all(self) -> Sequence[SeatBooking]:
        with backend_client(self._conn_factory, action="seat_bookings.list") as client:
            response = (
                client.table("seat_bookings")
                .select(_COLUMNS)
                .order("booking_date", desc=True)
                .order("start_time", desc=True)
                .execute()
            )
            return [self._to_booking(r) for r in fetchall(response)]

    def get_by_id(self, booking_id: str) -> Optional[SeatBooking]:
        with backend_client(self._conn_factory, action="seat_bookings.get") as client:
            response = client.table("seat_bookings").select(_COLUMNS).eq("id", booking_id).limit(1).execute()
            row = fetchone(response)
            return self._to_booking(row) if row else None

    def create(
        self,
        *,
        user_id: str,
        seat_number: str,
        booking_date: date,
        start_time: time,
        end_time: time,
    ) -> None:
        row = {
            "user_id": user_id,
            "seat_number": seat_number,
            "booking_date": booking_date.isoformat(),
            "start_time": start_time.strftime("%H:%M"),
            "end_time": end_time.strftime("%H:%M"),
        }
        with backend_client(self._conn_factory, action="seat_bookings.create") as client:
            client.table("seat_bookings").insert(row).execute()

    def update_status(self, booking_id: str, status: BookingStatus) -> None:
        with backend_client(self._conn_factory, action="seat_bookings.update_status") as client:
            client.table("seat_bookings").update({"status": status.value}).eq("id", booking_id).execute()
