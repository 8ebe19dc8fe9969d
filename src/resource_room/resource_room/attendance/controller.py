from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.web import json_body, teacher_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students/<int:student_id>/checkin", methods=["POST"], endpoint="students_checkin")
    @teacher_required
    def students_checkin(student_id: int):
        """Student pressed "I'M READY" for one subject group."""
        result = container.attendance_service.check_in(
            teacher_id=g.teacher.teacher_id,
            student_id=student_id,
            group=json_body().get("group"),
        )
        return jsonify(
            {
                "message": "Check-in successful",
                "tokensEarned": result.tokens_awarded,
                "totalTokens": result.total_tokens,
                "todaySubjects": list(result.session.subjects_attended),
            }
        )
