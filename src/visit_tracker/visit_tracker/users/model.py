from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object; (name, role) is the natural key. Only a salted hash of
    the password is ever held.
    """

    user_id: int
    name: str
    role: Role
    password_hash: str
    phone_number: Optional[str] = None
    reporting_manager_email: Optional[str] = None
    profile_pic: Optional[str] = None
    created_at: Optional[datetime] = None

    def as_api_dict(self) -> Dict[str, Any]:
        return {
            "id": self.user_id,
            "name": self.name,
            "role": self.role.value,
            "phoneNumber": self.phone_number,
            "reportingManagerEmail": self.reporting_manager_email,
            "profilePic": self.profile_pic,
            "createdAt": self.created_at.strftime("%Y-%m-%d %H:%M:%S") if self.created_at else None,
        }
