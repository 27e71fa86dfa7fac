from __future__ import annotations

from flask import Flask

from ..common.http import ok
from ..container import Container
from ..users.guards import current_user, student_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/student/time-slots", methods=["GET"], endpoint="student_time_slots")
    @student_required
    def student_time_slots():
        slots = container.timeslot_service.list_for_user(current_user().user_id)
        return ok(
            time_slots=[
                {
                    "id": s.slot_id,
                    "start_time": s.start_time.strftime("%H:%M"),
                    "end_time": s.end_time.strftime("%H:%M"),
                    "label": s.label(),
                }
                for s in slots
            ]
        )
