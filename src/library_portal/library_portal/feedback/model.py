from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import FeedbackStatus


@dataclass(frozen=True)
class Feedback:
    feedback_id: str
    user_id: str
    subject: str
    message: str
    rating: Optional[int]
    status: FeedbackStatus
    created_at: Optional[datetime] = None
