from __future__ import annotations

from typing import Protocol, Sequence

from .model import SlotInput, TimeSlot


class TimeSlotRepository(Protocol):
    def list_for_user(self, user_id: str) -> Sequence[TimeSlot]:
        raise NotImplementedError

    def insert_many(self, user_id: str, slots: Sequence[SlotInput]) -> None:
        raise NotImplementedError
