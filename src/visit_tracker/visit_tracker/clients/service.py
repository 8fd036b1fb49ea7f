from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.exceptions import NotFoundError
from .model import Client
from .repository import ClientRepository


class ClientService:
    """Use case: manage client location profiles (admin screens)."""

    def __init__(self, clients: ClientRepository, *, clock: Callable[[], datetime] = now_local):
        self._clients = clients
        self._clock = clock

    def list_clients(self) -> Sequence[Client]:
        return self._clients.list_all()

    def create(self, *, name: str, company: Optional[str] = None, location: Optional[str] = None) -> Client:
        name = require_non_empty(name, "name")
        self._clients.create(
            name=name,
            company=optional_text(company),
            location=optional_text(location),
            created_at=self._clock(),
        )
        return self._clients.get_by_name(name)

    def delete(self, name: str) -> None:
        name = require_non_empty(name, "name")
        if not self._clients.delete_by_name(name):
            raise NotFoundError(f"Client {name!r} not found")
