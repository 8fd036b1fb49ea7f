from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.exceptions import ValidationError

END_OF_DAY = time(23, 59, 59)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return parse_iso_date(value)


def now_local(tz_name: str = "Asia/Kolkata") -> datetime:
    """Current wall-clock time in ``tz_name`` as a naive datetime, whole seconds.

    Injected as a clock into services so tests can pin it.
    """
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None, microsecond=0)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, END_OF_DAY)
