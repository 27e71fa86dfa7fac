from __future__ import annotations

from datetime import datetime, tzinfo

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import day_bounds, now_local
from .model import SeatSummary
from .repository import LibrarySettingsRepository


class SeatService:
    def __init__(self, settings: LibrarySettingsRepository, attendance: AttendanceRepository, *, tz: tzinfo):
        self._settings = settings
        self._attendance = attendance
        self._tz = tz

    def seat_summary(self, *, now: datetime | None = None) -> SeatSummary:
        now = now or now_local(self._tz)
        start, _ = day_bounds(now.date(), self._tz)
        return SeatSummary(
            total_seats=self._settings.get_total_seats(),
            occupied=self._attendance.count_open(since=start),
        )
