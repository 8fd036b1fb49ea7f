from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..common.geo import Coordinates
from .model import Visit


class VisitRepository(Protocol):
    """Persistence contract for visits.

    Implementations must enforce at most one open visit per user with a database
    constraint and report a violation from ``create_visit`` as ``ConflictError``.
    """

    def get_by_id(self, visit_id: int) -> Optional[Visit]:
        raise NotImplementedError

    def get_open_for_user(self, user_name: str) -> Optional[Visit]:
        raise NotImplementedError

    def create_visit(
        self,
        *,
        user_name: str,
        client_name: str,
        company_name: str,
        check_in_address: Optional[str],
        check_in_map_link: Optional[str],
        check_in_coordinates: Coordinates,
        check_in_time: datetime,
    ) -> int:
        raise NotImplementedError

    def close_visit(
        self,
        *,
        visit_id: int,
        check_out_time: datetime,
        check_out_address: Optional[str],
        check_out_map_link: Optional[str],
        check_out_coordinates: Coordinates,
        distance_meters: Optional[float],
        location_mismatch: bool,
    ) -> bool:
        """Conditional update: only touches the row while it is still open.

        Returns False when no open row matched (missing or already closed).
        """

        raise NotImplementedError

    def delete_by_id(self, visit_id: int) -> bool:
        raise NotImplementedError

    def list_visits(
        self,
        *,
        user_name: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[Visit]:
        """Visits with ``start <= check_in_time <= end``, most recent first."""

        raise NotImplementedError

    def list_open_before(self, cutoff: datetime) -> Sequence[Visit]:
        """Open visits checked in strictly before ``cutoff``, oldest first."""

        raise NotImplementedError
