from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.web import json_body, teacher_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students/<int:student_id>/bonus", methods=["POST"], endpoint="students_bonus")
    @teacher_required
    def students_bonus(student_id: int):
        data = json_body()
        result = container.token_service.award_bonus(
            teacher_id=g.teacher.teacher_id,
            student_id=student_id,
            amount=data.get("amount"),
            reason=data.get("reason"),
        )
        return jsonify(
            {
                "message": "Bonus tokens awarded",
                "tokensAwarded": result.tokens_awarded,
                "totalTokens": result.total_tokens,
                "reason": result.reason,
            }
        )

    @app.route("/api/students/<int:student_id>/purchase", methods=["POST"], endpoint="students_purchase")
    @teacher_required
    def students_purchase(student_id: int):
        data = json_body()
        result = container.token_service.purchase(
            teacher_id=g.teacher.teacher_id,
            student_id=student_id,
            item=data.get("item"),
            cost=data.get("cost"),
        )
        return jsonify(
            {
                "message": "Purchase successful",
                "item": result.item,
                "cost": result.cost,
                "remainingTokens": result.remaining_tokens,
            }
        )
