from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.auth import admin_required, is_admin, json_body, login_required, scoped_user_name
from ..common.datetime_utils import parse_optional_date
from ..common.geo import Coordinates
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container


def _visit_id(data) -> int:
    raw = data.get("visitId", data.get("id"))
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError("visitId must be an integer")


def register(app: Flask, container: Container) -> None:
    visits = container.visit_service

    @app.route("/api/visits", methods=["GET"], endpoint="list_visits")
    @login_required
    def list_visits():
        result = visits.list_visits(
            user_name=scoped_user_name(request.args.get("userName")),
            from_date=parse_optional_date(request.args.get("fromDate")),
            to_date=parse_optional_date(request.args.get("toDate")),
        )
        return jsonify([v.as_api_dict() for v in result])

    @app.route("/api/visits/active", methods=["GET"], endpoint="active_visit")
    @login_required
    def active_visit():
        user_name = scoped_user_name(request.args.get("userName")) or session["user_name"]
        visit = visits.active_visit(user_name)
        return jsonify({"visit": visit.as_api_dict() if visit else None})

    @app.route("/api/visits/pending-checkouts", methods=["GET"], endpoint="pending_checkouts")
    @admin_required
    def pending_checkouts():
        minutes = request.args.get("reminderMinutes")
        result = visits.pending_checkouts(minutes if minutes not in (None, "") else None)
        return jsonify([v.as_api_dict() for v in result])

    @app.route("/api/visits/create", methods=["POST"], endpoint="create_visit")
    @login_required
    def create_visit():
        data = json_body()
        user_name = data.get("userName") or session["user_name"]
        if not is_admin() and user_name != session["user_name"]:
            raise AuthorizationError("Cannot check in on behalf of another user")

        result = visits.check_in(
            user_name=user_name,
            client_name=data.get("clientName"),
            company_name=data.get("companyName"),
            coordinates=Coordinates.parse(data.get("latitude"), data.get("longitude")),
            check_in_address=data.get("checkInAddress"),
            check_in_map_link=data.get("checkInMapLink"),
        )
        body = {"success": True, "visitId": result.visit.visit_id, "visit": result.visit.as_api_dict()}
        if result.warning:
            body["warning"] = result.warning
        return jsonify(body), 201

    @app.route("/api/visits/update", methods=["POST"], endpoint="checkout_visit")
    @login_required
    def checkout_visit():
        data = json_body()
        visit_id = _visit_id(data)
        if not is_admin() and visits.get(visit_id).user_name != session["user_name"]:
            raise AuthorizationError("Cannot check out another user's visit")

        result = visits.check_out(
            visit_id,
            coordinates=Coordinates.parse(data.get("latitude"), data.get("longitude")),
            check_out_address=data.get("checkOutAddress"),
            check_out_map_link=data.get("checkOutMapLink"),
        )
        return jsonify({"success": True, "visit": result.visit.as_api_dict()})

    @app.route("/api/visits/delete", methods=["POST"], endpoint="delete_visit")
    @admin_required
    def delete_visit():
        visits.delete(_visit_id(json_body()))
        return jsonify({"success": True})
