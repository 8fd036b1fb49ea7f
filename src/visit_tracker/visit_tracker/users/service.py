from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


def parse_role(value: str) -> Role:
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        raise ValidationError("role must be 'user' or 'admin'")


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, name: str, role: str, password: str) -> User:
        user = self._users.get(require_non_empty(name, "name"), parse_role(role))
        if not user:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. legacy rows whose password column never held a hash
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")
        return user


class UserService:
    """Use case: manage users (admin)."""

    def __init__(
        self,
        users: UserRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._users = users
        self._clock = clock

    def upsert(
        self,
        *,
        name: str,
        role: str,
        password: Optional[str] = None,
        phone_number: Optional[str] = None,
        reporting_manager_email: Optional[str] = None,
        profile_pic: Optional[str] = None,
    ) -> User:
        name = require_non_empty(name, "name")
        role_ = parse_role(role)
        email = optional_text(reporting_manager_email)
        if email:
            email = require_email(email, "reportingManagerEmail")

        existing = self._users.get(name, role_)
        if password:
            password_hash = generate_password_hash(require_min_length(password, "password", MIN_PASSWORD_LENGTH))
        elif existing:
            password_hash = existing.password_hash
        else:
            raise ValidationError("password is required for a new user")

        self._users.upsert(
            name=name,
            role=role_,
            password_hash=password_hash,
            phone_number=optional_text(phone_number),
            reporting_manager_email=email,
            profile_pic=optional_text(profile_pic),
            created_at=self._clock(),
        )
        logger.info("%s user %s (%s)", "updated" if existing else "created", name, role_.value)
        return self._users.get(name, role_)

    def get(self, name: str) -> Optional[User]:
        users = self._users.find_by_name(require_non_empty(name, "name"))
        return users[0] if users else None

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()

    def reporting_manager_email(self, name: str) -> Optional[str]:
        for user in self._users.find_by_name(name):
            if user.reporting_manager_email:
                return user.reporting_manager_email
        return None

    def delete_user(self, name: str) -> int:
        """Delete every account with this name and their visits; returns visits removed."""
        name = require_non_empty(name, "name")
        if not self._users.find_by_name(name):
            raise NotFoundError(f"User {name!r} not found")

        removed = self._users.delete_with_visits(name)
        logger.info("deleted user %s and %s visit(s)", name, removed)
        return removed

    def ensure_admin(self, name: str, password: str) -> bool:
        """Seed an admin account if none exists under ``name``; True when created."""
        if self._users.get(name, Role.ADMIN):
            return False
        self.upsert(name=name, role=Role.ADMIN.value, password=password)
        return True
