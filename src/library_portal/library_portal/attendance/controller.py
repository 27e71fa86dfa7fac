from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import json_body, ok
from ..container import Container
from ..core.exceptions import ValidationError
from ..users.guards import admin_required, current_user, student_required
from ..users.service import profile_to_dict
from .service import record_to_ui


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    @app.route("/api/student/dashboard", methods=["GET"], endpoint="student_dashboard")
    @student_required
    def student_dashboard():
        data = attendance.dashboard(current_user().user_id)
        return ok(
            profile=profile_to_dict(data.profile) if data.profile else None,
            records=[record_to_ui(r) for r in data.recent],
            is_checked_in=data.is_checked_in,
            current_session_minutes=data.current_session_minutes,
        )

    @app.route("/api/student/check-in", methods=["POST"], endpoint="student_check_in")
    @student_required
    def student_check_in():
        record = attendance.check_in(current_user().user_id, purpose=json_body().get("purpose"))
        return ok("You have successfully checked into the library.", 201, record=record_to_ui(record))

    @app.route("/api/student/check-out", methods=["POST"], endpoint="student_check_out")
    @student_required
    def student_check_out():
        record = attendance.check_out(current_user().user_id)
        return ok("You have successfully checked out of the library.", record=record_to_ui(record))

    @app.route("/api/student/stats", methods=["GET"], endpoint="student_stats")
    @student_required
    def student_stats():
        stats = attendance.stats(current_user().user_id)
        return ok(
            weekly=[{"day": d.label, "date": d.day.isoformat(), "hours": d.hours} for d in stats.weekly.days],
            total_hours=stats.weekly.total_hours,
            average_hours=stats.weekly.average_hours,
            streak=stats.streak,
            goal={
                "goal": stats.goal.goal,
                "count": stats.goal.count,
                "percentage": stats.goal.percentage,
                "remaining": stats.goal.remaining,
                "achieved": stats.goal.achieved,
                "message": stats.goal.message,
            },
            calendar=[d.isoformat() for d in stats.calendar],
        )

    @app.route("/api/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @admin_required
    def admin_attendance():
        raw = (request.args.get("date") or "").strip()
        try:
            day = parse_iso_date(raw) if raw else now_local(attendance.tz).date()
        except ValueError:
            raise ValidationError("Invalid date (YYYY-MM-DD)")
        return ok(date=day.isoformat(), records=attendance.records_for_day(day))

    @app.route("/api/admin/dashboard", methods=["GET"], endpoint="admin_dashboard")
    @admin_required
    def admin_dashboard():
        summary = attendance.admin_day_summary()
        snapshot = container.occupancy_reader.current()
        return ok(
            total_students=container.account_admin_service.count_students(),
            check_ins_today=summary.check_ins_today,
            average_duration=summary.average_duration,
            occupancy=snapshot.to_dict() if snapshot else None,
        )
