"""Google Geocoding API client.

Failures are never turned into an empty address: callers get
``GeocodingNoResultError`` when Google answered with nothing, and
``ExternalServiceError`` (carrying the upstream status) when the service could not
be used at all. No retries happen here.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from ..common.geo import Coordinates
from ..common.validators import require_non_empty
from ..core.exceptions import ExternalServiceError, GeocodingNoResultError

logger = logging.getLogger(__name__)

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"


@dataclass(frozen=True)
class GeocodeResult:
    latitude: float
    longitude: float
    formatted_address: str

    def as_api_dict(self) -> Dict[str, Any]:
        return {"lat": self.latitude, "lng": self.longitude, "formatted_address": self.formatted_address}


class GoogleGeocodingClient:
    def __init__(
        self,
        api_key: Optional[str],
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        url: str = GEOCODE_URL,
    ):
        self._api_key = api_key
        self._session = session or requests.Session()
        self._timeout = timeout
        self._url = url

    def reverse(self, coordinates: Coordinates) -> str:
        logger.info("reverse geocoding lat=%s lng=%s", coordinates.latitude, coordinates.longitude)
        data = self._request({"latlng": f"{coordinates.latitude},{coordinates.longitude}"})
        try:
            return data["results"][0]["formatted_address"]
        except (KeyError, IndexError, TypeError) as e:
            raise _bad_response(e) from e

    def forward(self, address: str) -> GeocodeResult:
        address = require_non_empty(address, "address")
        logger.info("forward geocoding %r", address)
        data = self._request({"address": address})
        try:
            first = data["results"][0]
            location = first["geometry"]["location"]
            return GeocodeResult(
                latitude=float(location["lat"]),
                longitude=float(location["lng"]),
                formatted_address=first.get("formatted_address", address),
            )
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
            raise _bad_response(e) from e

    def _request(self, params: Dict[str, str]) -> Dict[str, Any]:
        if not self._api_key:
            raise ExternalServiceError("Geocoding API key not configured", upstream_status="NOT_CONFIGURED")

        try:
            resp = self._session.get(self._url, params={**params, "key": self._api_key}, timeout=self._timeout)
        except requests.RequestException as e:
            logger.error("geocoding request failed: %s", e)
            raise ExternalServiceError("Geocoding service unavailable", upstream_status="UNAVAILABLE", details=str(e)) from e

        if resp.status_code != 200:
            logger.error("geocoding HTTP %s", resp.status_code)
            raise ExternalServiceError(
                "Geocoding service unavailable",
                upstream_status=f"HTTP_{resp.status_code}",
                details=resp.text[:200],
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ExternalServiceError("Geocoding returned invalid JSON", upstream_status="BAD_RESPONSE") from e
        if not isinstance(data, dict):
            raise _bad_response(TypeError(type(data).__name__))

        status = data.get("status")
        if status == "ZERO_RESULTS" or (status == "OK" and not data.get("results")):
            logger.warning("geocoding found no result for %s", params)
            raise GeocodingNoResultError("No geocoding result", upstream_status="ZERO_RESULTS")
        if status != "OK":
            logger.warning("geocoding failed: status=%s message=%s", status, data.get("error_message"))
            raise ExternalServiceError(
                "Geocoding failed",
                upstream_status=status,
                details=data.get("error_message"),
            )
        return data


def _bad_response(error: Exception) -> ExternalServiceError:
    logger.error("geocoding response missing fields: %r", error)
    return ExternalServiceError("Geocoding returned an unexpected response", upstream_status="BAD_RESPONSE")
