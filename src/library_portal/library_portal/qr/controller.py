from __future__ import annotations

from flask import Flask, request, send_file

from ..attendance.service import record_to_ui
from ..common.http import json_body, ok
from ..container import Container
from ..core.exceptions import InvalidQrPayloadError
from ..users.guards import admin_required, current_user, student_required
from .codec import decode_image


def register(app: Flask, container: Container) -> None:
    qr = container.qr_service

    @app.route("/api/student/qr.png", methods=["GET"], endpoint="student_qr_image")
    @student_required
    def student_qr_image():
        return send_file(qr.qr_image_for(current_user().user_id), mimetype="image/png")

    @app.route("/api/admin/students/<user_id>/qr.png", methods=["GET"], endpoint="admin_student_qr_image")
    @admin_required
    def admin_student_qr_image(user_id: str):
        return send_file(
            qr.qr_image_for(user_id),
            mimetype="image/png",
            as_attachment=request.args.get("download") == "1",
            download_name=f"qr-{user_id}.png",
        )

    @app.route("/api/student/qr/scan", methods=["POST"], endpoint="student_qr_scan")
    @student_required
    def student_qr_scan():
        record = qr.check_in_from_scan(current_user().user_id, json_body().get("code"))
        return ok("Checked in with QR code.", 201, record=record_to_ui(record))

    @app.route("/api/student/qr/scan/image", methods=["POST"], endpoint="student_qr_scan_image")
    @student_required
    def student_qr_scan_image():
        file = request.files.get("image")
        if file is None:
            raise InvalidQrPayloadError("Image file is required")
        scanned = decode_image(file.stream)
        if scanned is None:
            raise InvalidQrPayloadError("No QR code found in the image")
        record = qr.check_in_from_scan(current_user().user_id, scanned)
        return ok("Checked in with QR code.", 201, record=record_to_ui(record))
