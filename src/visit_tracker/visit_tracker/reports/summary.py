"""Pure reductions over a visit collection for reports and e-mails."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, List, Sequence

from ..visits.model import Visit

IN_PROGRESS = "In Progress"


@dataclass(frozen=True)
class VisitSummary:
    total: int
    completed: int
    in_progress: int
    total_minutes: int
    mismatches: int

    @property
    def total_duration(self) -> str:
        return format_minutes(self.total_minutes)

    def as_api_dict(self) -> dict:
        return {
            "totalVisits": self.total,
            "completed": self.completed,
            "inProgress": self.in_progress,
            "totalMinutes": self.total_minutes,
            "totalDuration": self.total_duration,
            "mismatches": self.mismatches,
        }


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60}h {minutes % 60}m"


def visit_duration_label(visit: Visit) -> str:
    if visit.check_out_time is None:
        return IN_PROGRESS
    return format_minutes(int((visit.check_out_time - visit.check_in_time) // timedelta(minutes=1)))


def summarize_visits(visits: Iterable[Visit]) -> VisitSummary:
    visits = list(visits)
    completed = [v for v in visits if v.check_out_time is not None]
    # floor the total, not each visit
    total = sum((v.check_out_time - v.check_in_time for v in completed), timedelta())
    return VisitSummary(
        total=len(visits),
        completed=len(completed),
        in_progress=len(visits) - len(completed),
        total_minutes=int(total // timedelta(minutes=1)),
        mismatches=sum(1 for v in visits if v.location_mismatch),
    )


REPORT_COLUMNS = [
    "Date",
    "User",
    "Client",
    "Company",
    "Check-In Time",
    "Check-In Location",
    "Check-In Map",
    "Check-Out Time",
    "Check-Out Location",
    "Check-Out Map",
    "Duration",
    "Location Stat.",
    "Status",
]


def report_rows(visits: Sequence[Visit]) -> List[dict]:
    rows: List[dict] = []
    for v in visits:
        rows.append(
            {
                "Date": v.check_in_time.strftime("%Y-%m-%d"),
                "User": v.user_name,
                "Client": v.client_name or "",
                "Company": v.company_name or "",
                "Check-In Time": v.check_in_time.strftime("%H:%M:%S"),
                "Check-In Location": v.check_in_address or "",
                "Check-In Map": v.check_in_map_link or "",
                "Check-Out Time": v.check_out_time.strftime("%H:%M:%S") if v.check_out_time else "",
                "Check-Out Location": v.check_out_address or "",
                "Check-Out Map": v.check_out_map_link or "",
                "Duration": visit_duration_label(v),
                "Location Stat.": "MISMATCH" if v.location_mismatch else "OK",
                "Status": "Completed" if v.check_out_time else IN_PROGRESS,
            }
        )
    return rows
