from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Client


class ClientRepository(Protocol):
    def list_all(self) -> Sequence[Client]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Client]:
        raise NotImplementedError

    def create(self, *, name: str, company: Optional[str], location: Optional[str], created_at: datetime) -> int:
        """Insert a new client; a duplicate name raises ConflictError."""

        raise NotImplementedError

    def upsert(self, *, name: str, company: Optional[str], location: Optional[str], created_at: datetime) -> None:
        """Insert, or refresh company/location of the existing row (created_at is kept)."""

        raise NotImplementedError

    def delete_by_name(self, name: str) -> bool:
        raise NotImplementedError
