from __future__ import annotations

from flask import Flask, jsonify

from ..common.auth import admin_required, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/clients", methods=["GET"], endpoint="list_clients")
    @login_required
    def list_clients():
        return jsonify([c.as_api_dict() for c in container.client_service.list_clients()])

    @app.route("/api/clients/create", methods=["POST"], endpoint="create_client")
    @admin_required
    def create_client():
        data = json_body()
        client = container.client_service.create(
            name=data.get("name"),
            company=data.get("company"),
            location=data.get("location"),
        )
        return jsonify({"success": True, "client": client.as_api_dict()}), 201

    @app.route("/api/clients/delete", methods=["POST"], endpoint="delete_client")
    @admin_required
    def delete_client():
        container.client_service.delete(json_body().get("name"))
        return jsonify({"success": True})
