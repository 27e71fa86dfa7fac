from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_recent_for_user(self, user_id: str, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user(self, user_id: str, *, since: Optional[datetime] = None) -> Sequence[AttendanceRecord]:
        """All records of one user, newest first."""

        raise NotImplementedError

    def get_latest_for_user(self, user_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_latest_open_for_user(self, user_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def count_for_user_between(self, user_id: str, start: datetime, end: datetime) -> int:
        raise NotImplementedError

    def list_between(
        self,
        start: datetime,
        end: datetime,
        *,
        user_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records whose check-in falls in [start, end), newest first."""

        raise NotImplementedError

    def count_open(self, *, since: Optional[datetime] = None) -> int:
        raise NotImplementedError

    def create_checkin(self, *, user_id: str, check_in: datetime, purpose: str) -> AttendanceRecord:
        raise NotImplementedError

    def update_checkout(self, *, record_id: str, check_out: datetime) -> None:
        raise NotImplementedError
