from __future__ import annotations

from datetime import timedelta

from flask import Flask, g, jsonify, session

from ..common.web import SESSION_KEY, error_body, json_body, teacher_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(hours=int(app.config.get("SESSION_LIFETIME_HOURS", 24)))

    def _login(teacher_id: int) -> None:
        session.clear()
        session.permanent = True
        session[SESSION_KEY] = teacher_id

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        if session.get(SESSION_KEY):
            return jsonify(error_body("already_logged_in", "You are already logged in")), 400

        data = json_body()
        teacher = container.teacher_service.register(
            username=data.get("username"),
            email=data.get("email"),
            password=data.get("password"),
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            school=data.get("school"),
            registration_code=data.get("registrationCode"),
        )
        _login(teacher.teacher_id)
        return jsonify({"message": "Registration successful", "teacher": teacher.to_public()}), 201

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        if session.get(SESSION_KEY):
            return jsonify(error_body("already_logged_in", "You are already logged in")), 400

        data = json_body()
        teacher = container.teacher_service.authenticate(data.get("login"), data.get("password"))
        _login(teacher.teacher_id)
        return jsonify({"message": "Login successful", "teacher": teacher.to_public()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    @teacher_required
    def auth_logout():
        session.clear()
        return jsonify({"message": "Logout successful"})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @teacher_required
    def auth_me():
        return jsonify({"teacher": g.teacher.to_public()})

    @app.route("/api/auth/check", methods=["GET"], endpoint="auth_check")
    def auth_check():
        teacher_id = session.get(SESSION_KEY)
        if teacher_id:
            return jsonify({"isAuthenticated": True, "teacherId": teacher_id})
        return jsonify({"isAuthenticated": False})
