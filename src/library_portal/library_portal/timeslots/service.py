from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_clock
from ..common.validators import require_time_order
from ..core.exceptions import ValidationError
from .model import SlotInput, TimeSlot
from .repository import TimeSlotRepository


def parse_slots(raw_slots: Optional[Iterable[Mapping[str, object]]]) -> List[SlotInput]:
    """Validate admin-entered slots before anything is sent.

    Rows left completely blank are dropped; a half-filled row or a slot whose
    start is not before its end rejects the whole submission.
    """

    slots: List[SlotInput] = []
    if raw_slots is not None and not isinstance(raw_slots, (list, tuple)):
        raise ValidationError("Invalid time slot list")
    for raw in raw_slots or []:
        if not isinstance(raw, Mapping):
            raise ValidationError("Invalid time slot")
        start_s = str(raw.get("start") or "").strip()
        end_s = str(raw.get("end") or "").strip()
        if not start_s and not end_s:
            continue
        if not start_s or not end_s:
            raise ValidationError("Invalid time slot: each slot needs a start and an end time")
        try:
            start, end = parse_clock(start_s), parse_clock(end_s)
        except ValueError:
            raise ValidationError("Invalid time slot: use HH:MM")
        require_time_order(start, end, "Invalid time slot")
        slots.append(SlotInput(start_time=start, end_time=end))
    return slots


class TimeSlotService:
    def __init__(self, slots: TimeSlotRepository):
        self._slots = slots

    def list_for_user(self, user_id: str) -> Sequence[TimeSlot]:
        return self._slots.list_for_user(user_id)
