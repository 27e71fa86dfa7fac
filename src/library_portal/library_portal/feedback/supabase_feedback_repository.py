from __future__ import annotations

from datetime import tzinfo
from typing import Any, Dict, Optional, Sequence

from ..backend.base import backend_client, fetchall, fetchone
from ..backend.connection import BackendConnection
from ..common.datetime_utils import parse_timestamp
from ..core.enums import FeedbackStatus
from .model import Feedback
from .repository import FeedbackRepository

_COLUMNS = "id, user_id, subject, message, rating, status, created_at"


class SupabaseFeedbackRepository(FeedbackRepository):
    def __init__(self, conn_factory: BackendConnection, tz: tzinfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def _to_feedback(self, row: Dict[str, Any]) -> Feedback:
        rating = row.get("rating")
        return Feedback(
            feedback_id=str(row["id"]),
            user_id=str(row["user_id"]),
            subject=row.get("subject") or "",
            message=row.get("message") or "",
            rating=int(rating) if rating is not None else None,
            status=FeedbackStatus(row.get("status") or FeedbackStatus.PENDING.value),
            created_at=parse_timestamp(row.get("created_at"), self._tz),
        )

    def list_for_user(self, user_id: str) -> Sequence[Feedback]:
        with backend_client(self._conn_factory, action="feedback.list_for_user") as client:
            response = (
                client.table("feedback")
                .select(_COLUMNS)
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
            return [self._to_feedback(r) for r in fetchall(response)]

    def list_all(self) -> Sequence[Feedback]:
        with backend_client(self._conn_factory, action="feedback.list") as client:
            response = client.table("feedback").select(_COLUMNS).order("created_at", desc=True).execute()
            return [self._to_feedback(r) for r in fetchall(response)]

    def get_by_id(self, feedback_id: str) -> Optional[Feedback]:
        with backend_client(self._conn_factory, action="feedback.get") as client:
            response = client.table("feedback").select(_COLUMNS).eq("id", feedback_id).limit(1).execute()
            row = fetchone(response)
            return self._to_feedback(row) if row else None

    def create(self, *, user_id: str, subject: str, message: str, rating: int) -> None:
        with backend_client(self._conn_factory, action="feedback.create") as client:
            client.table("feedback").insert(
                {"user_id": user_id, "subject": subject, "message": message, "rating": rating}
            ).execute()

    def update_status(self, feedback_id: str, status: FeedbackStatus) -> None:
        with backend_client(self._conn_factory, action="feedback.update_status") as client:
            client.table("feedback").update({"status": status.value}).eq("id", feedback_id).execute()
