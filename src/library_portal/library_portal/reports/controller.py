from __future__ import annotations

from flask import Flask, request, send_file

from ..container import Container
from ..users.guards import admin_required, current_user, student_required
from .service import ExportedFile, parse_format


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    def _send(exported: ExportedFile):
        return send_file(
            exported.content,
            mimetype=exported.mimetype,
            as_attachment=True,
            download_name=exported.filename,
        )

    @app.route("/api/admin/reports", methods=["GET"], endpoint="admin_report")
    @admin_required
    def admin_report():
        fmt = parse_format(request.args.get("format", "excel"))
        start, end = reports.resolve_range(
            start=request.args.get("start"),
            end=request.args.get("end"),
            preset=request.args.get("preset"),
        )
        student = request.args.get("student") or None
        if student == "all":
            student = None
        return _send(reports.export(fmt=fmt, start=start, end=end, user_id=student))

    @app.route("/api/student/report", methods=["GET"], endpoint="student_report")
    @student_required
    def student_report():
        fmt = parse_format(request.args.get("format", "excel"))
        start, end = reports.resolve_range(start=request.args.get("start"), end=request.args.get("end"))
        return _send(reports.export(fmt=fmt, start=start, end=end, user_id=current_user().user_id, personal=True))

    @app.route("/api/student/certificate", methods=["GET"], endpoint="student_certificate")
    @student_required
    def student_certificate():
        return _send(reports.certificate(current_user().user_id))
