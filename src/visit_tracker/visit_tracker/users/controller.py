from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.auth import admin_required, is_admin, json_body, login_required
from ..core.exceptions import AuthorizationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/user/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        user = container.auth_service.authenticate(data.get("name", ""), data.get("role", "user"), data.get("password", ""))

        session.clear()
        session["user_name"] = user.name
        session["role"] = user.role.value
        return jsonify({"success": True, "user": user.as_api_dict()})

    @app.route("/api/user/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @admin_required
    def list_users():
        return jsonify([u.as_api_dict() for u in container.user_service.list_users()])

    @app.route("/api/user/<name>", methods=["GET"], endpoint="get_user")
    @login_required
    def get_user(name: str):
        if not is_admin() and name != session["user_name"]:
            raise AuthorizationError("Cannot view another user's profile")
        user = container.user_service.get(name)
        if not user:
            return jsonify({"exists": False})
        return jsonify({"exists": True, "user": user.as_api_dict()})

    @app.route("/api/user/update", methods=["POST"], endpoint="update_user")
    @admin_required
    def update_user():
        data = json_body()
        user = container.user_service.upsert(
            name=data.get("name"),
            role=data.get("role", "user"),
            password=data.get("password"),
            phone_number=data.get("phoneNumber"),
            reporting_manager_email=data.get("reportingManagerEmail"),
            profile_pic=data.get("profilePic"),
        )
        return jsonify({"success": True, "user": user.as_api_dict()})

    @app.route("/api/user/delete", methods=["POST"], endpoint="delete_user")
    @admin_required
    def delete_user():
        data = json_body()
        removed = container.user_service.delete_user(data.get("userName") or data.get("name"))
        return jsonify({"success": True, "deletedVisits": removed})
