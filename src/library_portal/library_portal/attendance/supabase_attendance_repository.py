from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any, Dict, Optional, Sequence

from ..backend.base import backend_client, fetchall, fetchcount, fetchone
from ..backend.connection import BackendConnection
from ..common.datetime_utils import parse_timestamp
from ..core.exceptions import BackendError
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "id, user_id, check_in, check_out, purpose"


class SupabaseAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: BackendConnection, tz: tzinfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def _to_record(self, row: Dict[str, Any]) -> AttendanceRecord:
        return AttendanceRecord(
            record_id=str(row["id"]),
            user_id=str(row["user_id"]),
            check_in=parse_timestamp(row["check_in"], self._tz),
            check_out=parse_timestamp(row.get("check_out"), self._tz),
            purpose=row.get("purpose"),
        )

    def list_recent_for_user(self, user_id: str, limit: int) -> Sequence[AttendanceRecord]:
        with backend_client(self._conn_factory, action="attendance.recent") as client:
            response = (
                client.table("attendance")
                .select(_COLUMNS)
                .eq("user_id", user_id)
                .order("check_in", desc=True)
                .limit(limit)
                .execute()
            )
            return [self._to_record(r) for r in fetchall(response)]

    def list_for_user(self, user_id: str, *, since: Optional[datetime] = None) -> Sequence[AttendanceRecord]:
        with backend_client(self._conn_factory, action="attendance.list_for_user") as client:
            query = client.table("attendance").select(_COLUMNS).eq("user_id", user_id)
            if since is not None:
                query = query.gte("check_in", since.isoformat())
            response = query.order("check_in", desc=True).execute()
            return [self._to_record(r) for r in fetchall(response)]

    def get_latest_for_user(self, user_id: str) -> Optional[AttendanceRecord]:
        rows = self.list_recent_for_user(user_id, 1)
        return rows[0] if rows else None

    def get_latest_open_for_user(self, user_id: str) -> Optional[AttendanceRecord]:
        with backend_client(self._conn_factory, action="attendance.latest_open") as client:
            response = (
                client.table("attendance")
                .select(_COLUMNS)
                .eq("user_id", user_id)
                .is_("check_out", "null")
                .order("check_in", desc=True)
                .limit(1)
                .execute()
            )
            row = fetchone(response)
            return self._to_record(row) if row else None

    def count_for_user_between(self, user_id: str, start: datetime, end: datetime) -> int:
        with backend_client(self._conn_factory, action="attendance.count_for_user") as client:
            response = (
                client.table("attendance")
                .select("id", count="exact", head=True)
                .eq("user_id", user_id)
                .gte("check_in", start.isoformat())
                .lt("check_in", end.isoformat())
                .execute()
            )
            return fetchcount(response)

    def list_between(
        self,
        start: datetime,
        end: datetime,
        *,
        user_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        with backend_client(self._conn_factory, action="attendance.list_between") as client:
            query = (
                client.table("attendance")
                .select(_COLUMNS)
                .gte("check_in", start.isoformat())
                .lt("check_in", end.isoformat())
            )
            if user_id:
                query = query.eq("user_id", user_id)
            response = query.order("check_in", desc=True).execute()
            return [self._to_record(r) for r in fetchall(response)]

    def count_open(self, *, since: Optional[datetime] = None) -> int:
        with backend_client(self._conn_factory, action="attendance.count_open") as client:
            query = client.table("attendance").select("id", count="exact", head=True).is_("check_out", "null")
            if since is not None:
                query = query.gte("check_in", since.isoformat())
            return fetchcount(query.execute())

    def create_checkin(self, *, user_id: str, check_in: datetime, purpose: str) -> AttendanceRecord:
        with backend_client(self._conn_factory, action="attendance.checkin") as client:
            response = (
                client.table("attendance")
                .insert({"user_id": user_id, "check_in": check_in.isoformat(), "purpose": purpose})
                .execute()
            )
            row = fetchone(response)
        if not row:
            raise BackendError("Check-in was not recorded")
        return self._to_record(row)

    def update_checkout(self, *, record_id: str, check_out: datetime) -> None:
        with backend_client(self._conn_factory, action="attendance.checkout") as client:
            client.table("attendance").update({"check_out": check_out.isoformat()}).eq("id", record_id).execute()
