from __future__ import annotations

from flask import Flask, jsonify

from ..common.auth import admin_required, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings/<key>", methods=["GET"], endpoint="get_setting")
    @login_required
    def get_setting(key: str):
        return jsonify({"key": key, "value": container.settings_service.get(key)})

    @app.route("/api/settings", methods=["POST"], endpoint="update_setting")
    @admin_required
    def update_setting():
        data = json_body()
        value = container.settings_service.update(data.get("key"), data.get("value"))
        return jsonify({"success": True, "key": data.get("key"), "value": value})

    @app.route("/api/settings", methods=["GET"], endpoint="list_settings")
    @admin_required
    def list_settings():
        return jsonify(container.settings_service.all())
