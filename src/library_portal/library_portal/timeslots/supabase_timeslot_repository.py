from __future__ import annotations

from typing import Sequence

from ..backend.base import backend_client, fetchall
from ..backend.connection import BackendConnection
from ..common.datetime_utils import parse_clock
from .model import SlotInput, TimeSlot
from .repository import TimeSlotRepository


class SupabaseTimeSlotRepository(TimeSlotRepository):
    def __init__(self, conn_factory: BackendConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: str) -> Sequence[TimeSlot]:
        with backend_client(self._conn_factory, action="student_time_slots.list") as client:
            response = (
                client.table("student_time_slots")
                .select("id, user_id, start_time, end_time")
                .eq("user_id", user_id)
                .order("start_time")
                .execute()
            )
            rows = fetchall(response)
        return [
            TimeSlot(
                slot_id=str(r["id"]) if r.get("id") is not None else None,
                user_id=str(r["user_id"]),
                start_time=parse_clock(r["start_time"]),
                end_time=parse_clock(r["end_time"]),
            )
            for r in rows
        ]

    def insert_many(self, user_id: str, slots: Sequence[SlotInput]) -> None:
        if not slots:
            return
        payload = [
            {
                "user_id": user_id,
                "start_time": s.start_time.strftime("%H:%M"),
                "end_time": s.end_time.strftime("%H:%M"),
            }
            for s in slots
        ]
        with backend_client(self._conn_factory, action="student_time_slots.insert") as client:
            client.table("student_time_slots").insert(payload).execute()
