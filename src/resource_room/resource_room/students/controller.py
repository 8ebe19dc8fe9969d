from __future__ import annotations

from typing import Optional

from flask import Flask, g, jsonify

from ..common.web import json_body, teacher_required
from ..container import Container
from .model import Student, StudentToday


def student_to_json(student: Student, today: Optional[StudentToday] = None) -> dict:
    return {
        "id": student.student_id,
        "name": student.name,
        "groups": list(student.groups),
        "primaryGroup": student.primary_group,
        # Older clients still read the single "group" field.
        "group": student.primary_group,
        "skillsCompleted": student.skills_completed,
        "totalSkills": student.total_skills,
        "tokens": student.tokens,
        "purchases": [
            {"item": p.item, "cost": p.cost, "date": p.purchased_at.isoformat()} for p in student.purchases
        ],
        "isActive": student.is_active,
        "todayTokens": today.today_tokens if today else 0,
        "todaySubjects": list(today.today_subjects) if today else [],
        "present": today.present if today else False,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    @teacher_required
    def students_list():
        rows = container.attendance_service.list_with_today(g.teacher.teacher_id)
        return jsonify([student_to_json(r.student, r) for r in rows])

    @app.route("/api/students", methods=["POST"], endpoint="students_add")
    @teacher_required
    def students_add():
        data = json_body()
        student = container.student_service.add_student(
            teacher_id=g.teacher.teacher_id,
            name=data.get("name"),
            groups=data.get("groups"),
            primary_group=data.get("primaryGroup"),
            skills_completed=data.get("skillsCompleted", 0),
            total_skills=data.get("totalSkills", 10),
        )
        return jsonify({"message": "Student added successfully", "student": student_to_json(student)}), 201

    @app.route("/api/students/<int:student_id>/groups", methods=["PUT"], endpoint="students_update_groups")
    @teacher_required
    def students_update_groups(student_id: int):
        data = json_body()
        student = container.student_service.update_student_groups(
            teacher_id=g.teacher.teacher_id,
            student_id=student_id,
            groups=data.get("groups"),
            primary_group=data.get("primaryGroup"),
        )
        return jsonify({"message": "Student groups updated successfully", "student": student_to_json(student)})

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="students_update")
    @teacher_required
    def students_update(student_id: int):
        student = container.student_service.update_student(
            teacher_id=g.teacher.teacher_id, student_id=student_id, fields=json_body()
        )
        return jsonify({"message": "Student updated successfully", "student": student_to_json(student)})

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="students_delete")
    @teacher_required
    def students_delete(student_id: int):
        container.student_service.deactivate_student(teacher_id=g.teacher.teacher_id, student_id=student_id)
        return jsonify({"message": "Student deleted successfully"})

    @app.route("/api/students/migrate", methods=["POST"], endpoint="students_migrate")
    @teacher_required
    def students_migrate():
        migrated = container.student_service.migrate_legacy_groups(g.teacher.teacher_id)
        return jsonify(
            {"message": f"Migration completed. Updated {migrated} students.", "migratedCount": migrated}
        )
