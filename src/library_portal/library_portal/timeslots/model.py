from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional


@dataclass(frozen=True)
class TimeSlot:
    """Study window assigned to a student by an admin (read-only to the student)."""

    slot_id: Optional[str]
    user_id: str
    start_time: time
    end_time: time

    def label(self) -> str:
        return f"{self.start_time.strftime('%H:%M')} - {self.end_time.strftime('%H:%M')}"


@dataclass(frozen=True)
class SlotInput:
    start_time: time
    end_time: time
