from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role; (name, role) identifies a user."""

    USER = "user"
    ADMIN = "admin"


class VisitState(str, Enum):
    """A visit is open until its check-out time is recorded."""

    OPEN = "open"
    CLOSED = "closed"
