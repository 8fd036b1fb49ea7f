"""Great-circle distance and coordinate helpers."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from ..core.constants import EARTH_RADIUS_M, MAP_LINK_TEMPLATE
from ..core.exceptions import ValidationError
from .validators import require_float


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    @classmethod
    def parse(cls, latitude: Any, longitude: Any) -> "Coordinates":
        """Build coordinates from untrusted input (strings or numbers, in degrees)."""
        lat = require_float(latitude, "latitude")
        lng = require_float(longitude, "longitude")
        if not -90.0 <= lat <= 90.0:
            raise ValidationError("latitude must be between -90 and 90")
        if not -180.0 <= lng <= 180.0:
            raise ValidationError("longitude must be between -180 and 180")
        return cls(latitude=lat, longitude=lng)

    def map_link(self) -> str:
        return MAP_LINK_TEMPLATE.format(lat=self.latitude, lng=self.longitude)


def haversine_distance(a: Coordinates, b: Coordinates) -> float:
    """Distance in meters between two points given in degrees.

    ``a`` is clamped to [0, 1] so rounding near the antipode cannot push
    ``sqrt(1 - a)`` out of its domain.
    """
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(h), math.sqrt(1 - h))
