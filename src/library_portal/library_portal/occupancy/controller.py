from __future__ import annotations

from flask import Flask

from ..common.http import fail, ok
from ..container import Container
from ..users.guards import admin_required, login_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/library/status", methods=["GET"], endpoint="library_status")
    @login_required
    def library_status():
        snapshot = container.occupancy_reader.current()
        if snapshot is None:
            return fail("Library status is unavailable", 502)
        return ok(status=snapshot.to_dict(), live=container.occupancy_reader.is_listening)

    @app.route("/api/admin/seats", methods=["GET"], endpoint="admin_seats")
    @admin_required
    def admin_seats():
        summary = container.seat_service.seat_summary()
        return ok(
            total_seats=summary.total_seats,
            occupied=summary.occupied,
            available=summary.available,
        )
