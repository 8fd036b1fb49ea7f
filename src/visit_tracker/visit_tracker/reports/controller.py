from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.auth import json_body, login_required, scoped_user_name
from ..common.datetime_utils import parse_optional_date
from ..container import Container
from .excel import XLSX_MIMETYPE, build_visit_csv, build_visit_workbook


def _filters(source) -> dict:
    return {
        "user_name": scoped_user_name(source.get("userName")),
        "from_date": parse_optional_date(source.get("fromDate")),
        "to_date": parse_optional_date(source.get("toDate")),
    }


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    @app.route("/api/send-report", methods=["POST"], endpoint="send_report")
    @login_required
    def send_report():
        data = json_body()
        recipient = reports.send_report(recipient_email=data.get("recipientEmail"), **_filters(data))
        return jsonify({"success": True, "message": f"Report sent to {recipient}"})

    @app.route("/api/reports/visits.xlsx", methods=["GET"], endpoint="export_visits_xlsx")
    @login_required
    def export_visits_xlsx():
        report = reports.build_report(**_filters(request.args))
        return send_file(
            io.BytesIO(build_visit_workbook(report.visits)),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name="visits.xlsx",
        )

    @app.route("/api/reports/visits.csv", methods=["GET"], endpoint="export_visits_csv")
    @login_required
    def export_visits_csv():
        report = reports.build_report(**_filters(request.args))
        return send_file(
            io.BytesIO(build_visit_csv(report.visits)),
            mimetype="text/csv",
            as_attachment=True,
            download_name="visits.csv",
        )
