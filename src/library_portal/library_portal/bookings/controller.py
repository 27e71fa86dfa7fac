from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import now_local
from ..common.http import json_body, ok
from ..container import Container
from ..users.guards import admin_required, current_user, student_required
from .service import booking_to_dict


def register(app: Flask, container: Container) -> None:
    bookings = container.booking_service

    @app.route("/api/student/bookings", methods=["GET"], endpoint="student_bookings")
    @student_required
    def student_bookings():
        return ok(bookings=[booking_to_dict(b) for b in bookings.list_for_user(current_user().user_id)])

    @app.route("/api/student/bookings", methods=["POST"], endpoint="student_create_booking")
    @student_required
    def student_create_booking():
        data = json_body()
        seat = bookings.create(
            current_user().user_id,
            seat_number=data.get("seat_number"),
            booking_date=data.get("booking_date"),
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
            today=now_local(container.attendance_service.tz).date(),
        )
        return ok(f"Seat {seat} booked", 201)

    @app.route("/api/student/bookings/<booking_id>/cancel", methods=["POST"], endpoint="student_cancel_booking")
    @student_required
    def student_cancel_booking(booking_id: str):
        bookings.cancel_own(current_user().user_id, booking_id)
        return ok("Your seat booking has been cancelled")

    @app.route("/api/admin/bookings", methods=["GET"], endpoint="admin_bookings")
    @admin_required
    def admin_bookings():
        return ok(bookings=bookings.list_all_with_owners())

    @app.route("/api/admin/bookings/<booking_id>/status", methods=["POST", "PUT"], endpoint="admin_booking_status")
    @admin_required
    def admin_booking_status(booking_id: str):
        status = bookings.set_status(booking_id, json_body().get("status", ""))
        return ok(f"Booking status changed to {status.value}", status=status.value)
