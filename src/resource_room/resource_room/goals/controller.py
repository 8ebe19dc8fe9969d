from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.web import json_body, teacher_required
from ..container import Container
from .model import WeekGoals


def goals_to_json(week: WeekGoals) -> dict:
    return {
        group: {"topic": goal.topic, "goal": goal.goal, "icon": goal.icon}
        for group, goal in sorted(week.goals.items())
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/goals/current", methods=["GET"], endpoint="goals_current")
    @teacher_required
    def goals_current():
        return jsonify(goals_to_json(container.goal_service.get_current_goals(g.teacher.teacher_id)))

    @app.route("/api/goals/current", methods=["PUT"], endpoint="goals_set_current")
    @teacher_required
    def goals_set_current():
        week = container.goal_service.set_current_goals(g.teacher.teacher_id, json_body().get("goals"))
        return jsonify({"message": "Goals updated successfully", "weekOf": week.week_of.isoformat(), "goals": goals_to_json(week)})

    @app.route("/api/goals/current/<group>", methods=["DELETE"], endpoint="goals_retire_current")
    @teacher_required
    def goals_retire_current(group: str):
        container.goal_service.retire_current_goal(g.teacher.teacher_id, group)
        return jsonify({"message": "Goal retired"})

    @app.route("/api/goals/week/<day>", methods=["GET"], endpoint="goals_for_week")
    @teacher_required
    def goals_for_week(day: str):
        week = container.goal_service.get_goals_for_week(g.teacher.teacher_id, day)
        return jsonify({"weekOf": week.week_of.isoformat(), "goals": goals_to_json(week)})

    @app.route("/api/goals/weeks", methods=["GET"], endpoint="goals_weeks")
    @teacher_required
    def goals_weeks():
        weeks = container.goal_service.list_goal_weeks(g.teacher.teacher_id)
        return jsonify([{"weekOf": w.week_of.isoformat(), "goalCount": w.goal_count} for w in weeks])
