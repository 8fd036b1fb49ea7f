from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..common.geo import Coordinates
from ..core.enums import VisitState

WIRE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _fmt(value: Optional[datetime]) -> Optional[str]:
    return value.strftime(WIRE_TIMESTAMP_FORMAT) if value else None


@dataclass(frozen=True)
class Visit:
    """Domain entity: one client engagement bounded by check-in and check-out.

    ``check_out_time`` is None exactly while the visit is open; ``location_mismatch``
    only carries meaning once the visit is closed.
    """

    visit_id: int
    user_name: str
    client_name: Optional[str]
    company_name: Optional[str]
    check_in_time: datetime
    check_in_address: Optional[str] = None
    check_in_map_link: Optional[str] = None
    check_in_latitude: Optional[float] = None
    check_in_longitude: Optional[float] = None
    check_out_time: Optional[datetime] = None
    check_out_address: Optional[str] = None
    check_out_map_link: Optional[str] = None
    check_out_latitude: Optional[float] = None
    check_out_longitude: Optional[float] = None
    distance_meters: Optional[float] = None
    location_mismatch: bool = False
    created_at: Optional[datetime] = None

    @property
    def state(self) -> VisitState:
        return VisitState.OPEN if self.check_out_time is None else VisitState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.state is VisitState.OPEN

    @property
    def check_in_coordinates(self) -> Optional[Coordinates]:
        if self.check_in_latitude is None or self.check_in_longitude is None:
            return None
        return Coordinates(self.check_in_latitude, self.check_in_longitude)

    def as_api_dict(self) -> Dict[str, Any]:
        """camelCase shape used on the wire and in exports."""
        return {
            "id": self.visit_id,
            "userName": self.user_name,
            "clientName": self.client_name,
            "companyName": self.company_name,
            "checkInAddress": self.check_in_address,
            "checkInMapLink": self.check_in_map_link,
            "checkInTime": _fmt(self.check_in_time),
            "checkInLatitude": self.check_in_latitude,
            "checkInLongitude": self.check_in_longitude,
            "checkOutTime": _fmt(self.check_out_time),
            "checkOutAddress": self.check_out_address,
            "checkOutMapLink": self.check_out_map_link,
            "checkOutLatitude": self.check_out_latitude,
            "checkOutLongitude": self.check_out_longitude,
            "distanceMeters": round(self.distance_meters, 1) if self.distance_meters is not None else None,
            "locationMismatch": self.location_mismatch,
            "status": self.state.value,
            "createdAt": _fmt(self.created_at),
        }
