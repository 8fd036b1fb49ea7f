"""Canonical field mapping between storage rows and :class:`Visit`.

Engines disagree on identifier casing (Postgres folds unquoted names to lower case,
older tables used camelCase), so lookups go through a normalized key: lower case
with underscores removed. ``user_name``, ``userName`` and ``username`` all resolve
to the same field.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from .model import Visit

VISIT_COLUMNS = (
    "id",
    "user_name",
    "client_name",
    "company_name",
    "check_in_address",
    "check_in_map_link",
    "check_in_time",
    "check_in_latitude",
    "check_in_longitude",
    "check_out_time",
    "check_out_address",
    "check_out_map_link",
    "check_out_latitude",
    "check_out_longitude",
    "distance_meters",
    "location_mismatch",
    "created_at",
)

SELECT_VISIT_COLUMNS = ", ".join(VISIT_COLUMNS)


def _key(name: str) -> str:
    return name.replace("_", "").lower()


def _as_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("T", " "))


def _as_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def visit_from_row(row: Mapping[str, Any]) -> Visit:
    r = {_key(k): v for k, v in dict(row).items()}

    def get(name: str) -> Any:
        return r.get(_key(name))

    return Visit(
        visit_id=int(get("id")),
        user_name=get("user_name"),
        client_name=get("client_name"),
        company_name=get("company_name"),
        check_in_time=_as_datetime(get("check_in_time")),
        check_in_address=get("check_in_address"),
        check_in_map_link=get("check_in_map_link"),
        check_in_latitude=_as_float(get("check_in_latitude")),
        check_in_longitude=_as_float(get("check_in_longitude")),
        check_out_time=_as_datetime(get("check_out_time")),
        check_out_address=get("check_out_address"),
        check_out_map_link=get("check_out_map_link"),
        check_out_latitude=_as_float(get("check_out_latitude")),
        check_out_longitude=_as_float(get("check_out_longitude")),
        distance_meters=_as_float(get("distance_meters")),
        location_mismatch=bool(get("location_mismatch") or 0),
        created_at=_as_datetime(get("created_at")),
    )
