from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..common.validators import require_int_range, require_non_empty, require_text
from ..core.enums import FeedbackStatus
from ..core.exceptions import ValidationError
from ..users.repository import ProfileRepository
from .model import Feedback
from .repository import FeedbackRepository


def feedback_to_dict(f: Feedback, *, owner: Optional[Dict[str, str]] = None) -> Dict[str, object]:
    row: Dict[str, object] = {
        "id": f.feedback_id,
        "user_id": f.user_id,
        "subject": f.subject,
        "message": f.message,
        "rating": f.rating,
        "status": f.status.value,
        "created_at": f.created_at.isoformat() if f.created_at else None,
    }
    if owner is not None:
        row["profiles"] = owner
    return row


class FeedbackService:
    """Students submit feedback; admins move it forward (pending -> reviewed -> resolved)."""

    def __init__(self, feedback: FeedbackRepository, profiles: ProfileRepository):
        self._feedback = feedback
        self._profiles = profiles

    def submit(self, user_id: str, *, subject: Optional[str], message: Optional[str], rating=5) -> None:
        subject = require_text(subject, "Subject")
        message = require_text(message, "Message")
        if not (subject or "").strip() or not (message or "").strip():
            raise ValidationError("Please fill in all fields")
        self._feedback.create(
            user_id=user_id,
            subject=require_non_empty(subject, "Subject"),
            message=require_non_empty(message, "Message"),
            rating=require_int_range(5 if rating is None else rating, "Rating", low=1, high=5),
        )

    def list_for_user(self, user_id: str) -> Sequence[Feedback]:
        return self._feedback.list_for_user(user_id)

    def list_all_with_owners(self) -> List[Dict[str, object]]:
        items = self._feedback.list_all()
        owners = {p.user_id: p for p in self._profiles.list_by_ids(f.user_id for f in items)}
        out = []
        for f in items:
            p = owners.get(f.user_id)
            out.append(feedback_to_dict(f, owner={"full_name": p.full_name if p else "Unknown", "email": p.email if p else "Unknown"}))
        return out

    def advance_status(self, feedback_id: str, status: str) -> FeedbackStatus:
        try:
            new_status = FeedbackStatus(status)
        except ValueError:
            raise ValidationError("Invalid feedback status")

        item = self._feedback.get_by_id(feedback_id)
        if item is None:
            raise ValidationError("Feedback not found")
        if new_status.rank <= item.status.rank:
            raise ValidationError(f"Feedback is already {item.status.value}")

        self._feedback.update_status(feedback_id, new_status)
        return new_status
