from __future__ import annotations

from functools import wraps
from typing import Any, Dict, Optional

from flask import request, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_name" not in session:
            raise AuthenticationError("Login required")
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_name" not in session:
            raise AuthenticationError("Login required")
        if session.get("role") != Role.ADMIN.value:
            raise AuthorizationError("Admin access required")
        return view(*args, **kwargs)

    return wrapper


def is_admin() -> bool:
    return session.get("role") == Role.ADMIN.value


def scoped_user_name(requested: Optional[str]) -> Optional[str]:
    """Admins may query anyone (or everyone); other users only themselves."""
    if is_admin():
        return requested
    return session.get("user_name")


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()
