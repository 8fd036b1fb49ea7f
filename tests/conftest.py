from __future__ import annotations

import dataclasses
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

import pytest

from src.visit_tracker.visit_tracker.clients.model import Client
from src.visit_tracker.visit_tracker.core.enums import Role
from src.visit_tracker.visit_tracker.core.exceptions import ConflictError
from src.visit_tracker.visit_tracker.settings.service import SettingsService
from src.visit_tracker.visit_tracker.users.model import User
from src.visit_tracker.visit_tracker.visits.model import Visit
from src.visit_tracker.visit_tracker.visits.service import VisitService


class FakeClock:
    """Callable clock the tests move forward by hand."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class InMemoryVisits:
    def __init__(self):
        self.rows: Dict[int, Visit] = {}
        self._id = 0

    def get_by_id(self, visit_id: int) -> Optional[Visit]:
        return self.rows.get(int(visit_id))

    def _open_for(self, user_name: str) -> Optional[Visit]:
        return next((v for v in self.rows.values() if v.user_name == user_name and v.is_open), None)

    def get_open_for_user(self, user_name: str) -> Optional[Visit]:
        return self._open_for(user_name)

    def create_visit(self, *, user_name, client_name, company_name, check_in_address, check_in_map_link, check_in_coordinates, check_in_time) -> int:
        # stands in for the partial unique index
        if self._open_for(user_name):
            raise ConflictError(f"User {user_name!r} already has an open visit")
        self._id += 1
        self.rows[self._id] = Visit(
            visit_id=self._id,
            user_name=user_name,
            client_name=client_name,
            company_name=company_name,
            check_in_time=check_in_time,
            check_in_address=check_in_address,
            check_in_map_link=check_in_map_link,
            check_in_latitude=check_in_coordinates.latitude,
            check_in_longitude=check_in_coordinates.longitude,
            created_at=check_in_time,
        )
        return self._id

    def close_visit(self, *, visit_id, check_out_time, check_out_address, check_out_map_link, check_out_coordinates, distance_meters, location_mismatch) -> bool:
        visit = self.rows.get(int(visit_id))
        if visit is None or not visit.is_open:
            return False
        self.rows[visit.visit_id] = dataclasses.replace(
            visit,
            check_out_time=check_out_time,
            check_out_address=check_out_address,
            check_out_map_link=check_out_map_link,
            check_out_latitude=check_out_coordinates.latitude,
            check_out_longitude=check_out_coordinates.longitude,
            distance_meters=distance_meters,
            location_mismatch=location_mismatch,
        )
        return True

    def delete_by_id(self, visit_id: int) -> bool:
        return self.rows.pop(int(visit_id), None) is not None

    def list_visits(self, *, user_name=None, start=None, end=None) -> List[Visit]:
        items = [
            v
            for v in self.rows.values()
            if (user_name is None or v.user_name == user_name)
            and (start is None or v.check_in_time >= start)
            and (end is None or v.check_in_time <= end)
        ]
        items.sort(key=lambda v: (v.check_in_time, v.visit_id), reverse=True)
        return items

    def list_open_before(self, cutoff: datetime) -> List[Visit]:
        items = [v for v in self.rows.values() if v.is_open and v.check_in_time < cutoff]
        items.sort(key=lambda v: (v.check_in_time, v.visit_id))
        return items


class InMemoryClients:
    def __init__(self):
        self.rows: Dict[str, Client] = {}
        self._id = 0

    def list_all(self) -> List[Client]:
        return sorted(self.rows.values(), key=lambda c: c.name)

    def get_by_name(self, name: str) -> Optional[Client]:
        return self.rows.get(name)

    def create(self, *, name, company, location, created_at) -> int:
        if name in self.rows:
            raise ConflictError(f"Client {name!r} already exists")
        self._id += 1
        self.rows[name] = Client(client_id=self._id, name=name, company=company, location=location, created_at=created_at)
        return self._id

    def upsert(self, *, name, company, location, created_at) -> None:
        existing = self.rows.get(name)
        if existing:
            self.rows[name] = dataclasses.replace(existing, company=company, location=location)
        else:
            self.create(name=name, company=company, location=location, created_at=created_at)

    def delete_by_name(self, name: str) -> bool:
        return self.rows.pop(name, None) is not None


class BrokenClients(InMemoryClients):
    def upsert(self, **kwargs) -> None:
        raise RuntimeError("clients table unavailable")


class InMemorySettings:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def all(self) -> Dict[str, str]:
        return dict(self.values)


class InMemoryUsers:
    def __init__(self, visits: Optional[InMemoryVisits] = None):
        self.visits = visits or InMemoryVisits()
        self.rows: Dict[Tuple[str, Role], User] = {}
        self._id = 0

    def get(self, name: str, role: Role) -> Optional[User]:
        return self.rows.get((name, role))

    def find_by_name(self, name: str) -> List[User]:
        return sorted((u for u in self.rows.values() if u.name == name), key=lambda u: u.user_id)

    def list_all(self) -> List[User]:
        return sorted(self.rows.values(), key=lambda u: (u.name, u.role.value))

    def upsert(self, *, name, role, password_hash, phone_number, reporting_manager_email, profile_pic, created_at) -> None:
        existing = self.rows.get((name, role))
        if existing:
            self.rows[(name, role)] = dataclasses.replace(
                existing,
                password_hash=password_hash,
                phone_number=phone_number,
                reporting_manager_email=reporting_manager_email,
                profile_pic=profile_pic,
            )
            return
        self._id += 1
        self.rows[(name, role)] = User(
            user_id=self._id,
            name=name,
            role=role,
            password_hash=password_hash,
            phone_number=phone_number,
            reporting_manager_email=reporting_manager_email,
            profile_pic=profile_pic,
            created_at=created_at,
        )

    def delete_with_visits(self, name: str) -> int:
        ids = [v.visit_id for v in self.visits.rows.values() if v.user_name == name]
        for visit_id in ids:
            del self.visits.rows[visit_id]
        for key in [k for k in self.rows if k[0] == name]:
            del self.rows[key]
        return len(ids)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 6, 2, 9, 0, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def visit_repo() -> InMemoryVisits:
    return InMemoryVisits()


@pytest.fixture
def client_repo() -> InMemoryClients:
    return InMemoryClients()


@pytest.fixture
def setting_repo() -> InMemorySettings:
    return InMemorySettings()


@pytest.fixture
def user_repo(visit_repo) -> InMemoryUsers:
    return InMemoryUsers(visit_repo)


@pytest.fixture
def visit_service(visit_repo, client_repo, setting_repo, clock) -> VisitService:
    return VisitService(visit_repo, client_repo, SettingsService(setting_repo), clock=clock)


@pytest.fixture
def broken_client_repo() -> BrokenClients:
    return BrokenClients()
