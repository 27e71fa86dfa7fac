from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import FeedbackStatus
from .model import Feedback


class FeedbackRepository(Protocol):
    def list_for_user(self, user_id: str) -> Sequence[Feedback]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Feedback]:
        raise NotImplementedError

    def get_by_id(self, feedback_id: str) -> Optional[Feedback]:
        raise NotImplementedError

    def create(self, *, user_id: str, subject: str, message: str, rating: int) -> None:
        raise NotImplementedError

    def update_status(self, feedback_id: str, status: FeedbackStatus) -> None:
        raise NotImplementedError
