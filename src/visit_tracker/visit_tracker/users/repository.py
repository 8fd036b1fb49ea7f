from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get(self, name: str, role: Role) -> Optional[User]:
        raise NotImplementedError

    def find_by_name(self, name: str) -> Sequence[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        name: str,
        role: Role,
        password_hash: str,
        phone_number: Optional[str],
        reporting_manager_email: Optional[str],
        profile_pic: Optional[str],
        created_at: datetime,
    ) -> None:
        """Insert, or update every attribute except created_at of the (name, role) row."""

        raise NotImplementedError

    def delete_with_visits(self, name: str) -> int:
        """Delete the user rows and their visits in one transaction; returns visits removed."""

        raise NotImplementedError
