from __future__ import annotations

from datetime import tzinfo
from typing import Any, Dict, Iterable, Optional, Sequence

from ..backend.base import backend_client, fetchall, fetchone
from ..backend.connection import BackendConnection
from ..common.datetime_utils import parse_timestamp
from ..core.constants import DEFAULT_ATTENDANCE_GOAL
from .model import Profile, StudentIdentity
from .repository import ProfileRepository

_COLUMNS = "id, full_name, email, phone, student_id, seat_number, attendance_goal, created_at"


class SupabaseProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: BackendConnection, tz: tzinfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def _to_profile(self, row: Dict[str, Any]) -> Profile:
        return Profile(
            user_id=str(row["id"]),
            full_name=row.get("full_name") or "",
            email=row.get("email") or "",
            phone=row.get("phone"),
            student_id=row.get("student_id"),
            seat_number=row.get("seat_number"),
            attendance_goal=int(row.get("attendance_goal") or DEFAULT_ATTENDANCE_GOAL),
            created_at=parse_timestamp(row.get("created_at"), self._tz),
        )

    def get_by_id(self, user_id: str) -> Optional[Profile]:
        with backend_client(self._conn_factory, action="profiles.get") as client:
            response = client.table("profiles").select(_COLUMNS).eq("id", user_id).limit(1).execute()
            row = fetchone(response)
            return self._to_profile(row) if row else None

    def list_by_ids(self, user_ids: Iterable[str]) -> Sequence[Profile]:
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return []
        with backend_client(self._conn_factory, action="profiles.list") as client:
            response = (
                client.table("profiles")
                .select(_COLUMNS)
                .in_("id", ids)
                .order("created_at", desc=True)
                .execute()
            )
            return [self._to_profile(r) for r in fetchall(response)]

    def get_identities(self, user_ids: Iterable[str]) -> Dict[str, StudentIdentity]:
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return {}
        with backend_client(self._conn_factory, action="profiles.identities") as client:
            response = client.table("profiles").select("id, full_name, student_id").in_("id", ids).execute()
            return {
                str(r["id"]): StudentIdentity(full_name=r.get("full_name"), student_id=r.get("student_id"))
                for r in fetchall(response)
            }

    def upsert(
        self,
        *,
        user_id: str,
        full_name: str,
        email: str,
        student_id: Optional[str] = None,
        seat_number: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> None:
        row = {
            "id": user_id,
            "full_name": full_name,
            "email": email,
            "student_id": student_id,
            "seat_number": seat_number,
            "phone": phone,
        }
        with backend_client(self._conn_factory, action="profiles.upsert") as client:
            client.table("profiles").upsert(row, on_conflict="id").execute()

    def update_fields(self, user_id: str, fields: Dict[str, object]) -> None:
        if not fields:
            return
        with backend_client(self._conn_factory, action="profiles.update") as client:
            client.table("profiles").update(dict(fields)).eq("id", user_id).execute()
