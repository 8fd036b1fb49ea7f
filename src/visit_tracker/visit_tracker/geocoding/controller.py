from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import login_required
from ..common.geo import Coordinates
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/geocode", methods=["GET"], endpoint="reverse_geocode")
    @login_required
    def reverse_geocode():
        coords = Coordinates.parse(request.args.get("lat"), request.args.get("lng"))
        return jsonify({"address": container.geocoder.reverse(coords)})

    @app.route("/api/geocode-forward", methods=["GET"], endpoint="forward_geocode")
    @login_required
    def forward_geocode():
        return jsonify(container.geocoder.forward(request.args.get("address", "")).as_api_dict())
