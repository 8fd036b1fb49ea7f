from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Sequence

from ..clients.repository import ClientRepository
from ..common.datetime_utils import end_of_day, now_local, start_of_day
from ..common.geo import Coordinates
from ..common.validators import optional_text, require_int_range, require_non_empty
from ..core.constants import ALL_USERS, MAX_REMINDER_MINUTES, MIN_REMINDER_MINUTES
from ..core.exceptions import ConflictError, InvalidStateError, NotFoundError
from ..settings.service import SettingsService
from .model import Visit
from .policy import DistanceThresholdPolicy, LocationMismatchPolicy
from .repository import VisitRepository

logger = logging.getLogger(__name__)

CLIENT_CACHE_WARNING = "Visit created but client location was not updated."


@dataclass(frozen=True)
class CheckInResult:
    visit: Visit
    warning: Optional[str] = None


@dataclass(frozen=True)
class CheckOutResult:
    visit: Visit
    distance_meters: Optional[float]


class VisitService:
    """Use case: the open -> closed lifecycle of a field visit.

    Timestamps always come from the injected clock, never from the caller.
    """

    def __init__(
        self,
        visits: VisitRepository,
        clients: ClientRepository,
        settings: SettingsService,
        *,
        policy: Optional[LocationMismatchPolicy] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._visits = visits
        self._clients = clients
        self._settings = settings
        self._policy = policy or DistanceThresholdPolicy()
        self._clock = clock

    def get(self, visit_id: int) -> Visit:
        visit = self._visits.get_by_id(int(visit_id))
        if not visit:
            raise NotFoundError(f"Visit {visit_id} not found")
        return visit

    def active_visit(self, user_name: str) -> Optional[Visit]:
        return self._visits.get_open_for_user(require_non_empty(user_name, "userName"))

    def check_in(
        self,
        *,
        user_name: str,
        client_name: str,
        company_name: str,
        coordinates: Coordinates,
        check_in_address: Optional[str] = None,
        check_in_map_link: Optional[str] = None,
    ) -> CheckInResult:
        user_name = require_non_empty(user_name, "userName")
        client_name = require_non_empty(client_name, "clientName")
        company_name = require_non_empty(company_name, "companyName")
        check_in_address = optional_text(check_in_address)

        # Fast path only; the unique index on open visits settles concurrent check-ins.
        if self._visits.get_open_for_user(user_name):
            raise ConflictError(f"User {user_name!r} already has an open visit")

        now = self._clock()
        visit_id = self._visits.create_visit(
            user_name=user_name,
            client_name=client_name,
            company_name=company_name,
            check_in_address=check_in_address,
            check_in_map_link=optional_text(check_in_map_link) or coordinates.map_link(),
            check_in_coordinates=coordinates,
            check_in_time=now,
        )
        logger.info("check-in visit=%s user=%s client=%s", visit_id, user_name, client_name)

        warning = None
        try:
            self._clients.upsert(name=client_name, company=company_name, location=check_in_address, created_at=now)
        except Exception:
            # The client record is a derived cache; the visit stands without it.
            logger.warning("client cache upsert failed for %r", client_name, exc_info=True)
            warning = CLIENT_CACHE_WARNING

        return CheckInResult(visit=self.get(visit_id), warning=warning)

    def check_out(
        self,
        visit_id: int,
        *,
        coordinates: Coordinates,
        check_out_address: Optional[str] = None,
        check_out_map_link: Optional[str] = None,
    ) -> CheckOutResult:
        visit = self.get(visit_id)
        if not visit.is_open:
            raise InvalidStateError(f"Visit {visit_id} is already checked out")

        decision = self._policy.evaluate(
            check_in=visit.check_in_coordinates,
            check_out=coordinates,
            threshold_m=self._settings.distance_threshold(),
        )

        closed = self._visits.close_visit(
            visit_id=visit.visit_id,
            check_out_time=self._clock(),
            check_out_address=optional_text(check_out_address),
            check_out_map_link=optional_text(check_out_map_link) or coordinates.map_link(),
            check_out_coordinates=coordinates,
            distance_meters=decision.distance_meters,
            location_mismatch=decision.location_mismatch,
        )
        if not closed:
            # Lost a race: someone deleted or closed it between the read and the update.
            if self._visits.get_by_id(visit.visit_id) is None:
                raise NotFoundError(f"Visit {visit_id} not found")
            raise InvalidStateError(f"Visit {visit_id} is already checked out")

        logger.info(
            "check-out visit=%s distance=%s mismatch=%s",
            visit.visit_id,
            None if decision.distance_meters is None else round(decision.distance_meters, 1),
            decision.location_mismatch,
        )
        return CheckOutResult(visit=self.get(visit.visit_id), distance_meters=decision.distance_meters)

    def delete(self, visit_id: int) -> None:
        if not self._visits.delete_by_id(int(visit_id)):
            raise NotFoundError(f"Visit {visit_id} not found")
        logger.info("deleted visit=%s", visit_id)

    def list_visits(
        self,
        *,
        user_name: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Sequence[Visit]:
        """Most recent first; ``to_date`` covers the whole day up to 23:59:59."""
        user_name = optional_text(user_name)
        if user_name is not None and user_name.lower() == ALL_USERS:
            user_name = None

        return self._visits.list_visits(
            user_name=user_name,
            start=start_of_day(from_date) if from_date else None,
            end=end_of_day(to_date) if to_date else None,
        )

    def pending_checkouts(self, reminder_minutes: Optional[int] = None) -> Sequence[Visit]:
        """Open visits checked in more than ``reminder_minutes`` ago, oldest first."""
        if reminder_minutes is None:
            minutes = self._settings.reminder_minutes()
        else:
            minutes = require_int_range(
                reminder_minutes,
                "reminderMinutes",
                minimum=MIN_REMINDER_MINUTES,
                maximum=MAX_REMINDER_MINUTES,
            )
        cutoff = self._clock() - timedelta(minutes=minutes)
        return self._visits.list_open_before(cutoff)
