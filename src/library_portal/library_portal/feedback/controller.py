from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok
from ..container import Container
from ..users.guards import admin_required, current_user, student_required
from .service import feedback_to_dict


def register(app: Flask, container: Container) -> None:
    feedback = container.feedback_service

    @app.route("/api/student/feedback", methods=["GET"], endpoint="student_feedback")
    @student_required
    def student_feedback():
        return ok(feedback=[feedback_to_dict(f) for f in feedback.list_for_user(current_user().user_id)])

    @app.route("/api/student/feedback", methods=["POST"], endpoint="student_submit_feedback")
    @student_required
    def student_submit_feedback():
        data = json_body()
        feedback.submit(
            current_user().user_id,
            subject=data.get("subject"),
            message=data.get("message"),
            rating=data.get("rating"),
        )
        return ok("Thank you for your feedback.", 201)

    @app.route("/api/admin/feedback", methods=["GET"], endpoint="admin_feedback")
    @admin_required
    def admin_feedback():
        return ok(feedback=feedback.list_all_with_owners())

    @app.route("/api/admin/feedback/<feedback_id>/status", methods=["POST", "PUT"], endpoint="admin_feedback_status")
    @admin_required
    def admin_feedback_status(feedback_id: str):
        status = feedback.advance_status(feedback_id, json_body().get("status", ""))
        return ok(f"Feedback marked as {status.value}", status=status.value)
