from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Client:
    """Last known company/location for a named client, refreshed by each check-in."""

    client_id: int
    name: str
    company: Optional[str]
    location: Optional[str]
    created_at: Optional[datetime] = None

    def as_api_dict(self) -> Dict[str, Any]:
        return {
            "id": self.client_id,
            "name": self.name,
            "company": self.company,
            "location": self.location,
            "createdAt": self.created_at.strftime("%Y-%m-%d %H:%M:%S") if self.created_at else None,
        }
