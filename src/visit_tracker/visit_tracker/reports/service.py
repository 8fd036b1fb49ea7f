from __future__ import annotations

import html
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_email
from ..core.constants import ALL_USERS
from ..core.exceptions import ValidationError
from ..users.service import UserService
from ..visits.model import Visit
from ..visits.service import VisitService
from .excel import XLSX_MIMETYPE, build_visit_workbook
from .mailer import Attachment, SmtpMailer
from .summary import VisitSummary, summarize_visits


@dataclass(frozen=True)
class ReportData:
    visits: Sequence[Visit]
    summary: VisitSummary


class ReportService:
    def __init__(
        self,
        visits: VisitService,
        users: UserService,
        mailer: SmtpMailer,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._visits = visits
        self._users = users
        self._mailer = mailer
        self._clock = clock

    def build_report(
        self,
        *,
        user_name: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> ReportData:
        visits = self._visits.list_visits(user_name=user_name, from_date=from_date, to_date=to_date)
        return ReportData(visits=visits, summary=summarize_visits(visits))

    def send_report(
        self,
        *,
        user_name: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        recipient_email: Optional[str] = None,
    ) -> str:
        """E-mail the workbook; returns the address it went to.

        Without an explicit recipient the named user's reporting manager is used.
        """
        user_name = optional_text(user_name)
        label = user_name if user_name and user_name.lower() != ALL_USERS else "All Users"

        recipient = optional_text(recipient_email)
        if not recipient and label != "All Users":
            recipient = self._users.reporting_manager_email(user_name)
        if not recipient:
            raise ValidationError(f'No reporting manager email found for "{label}".')
        recipient = require_email(recipient, "recipientEmail")

        report = self.build_report(user_name=user_name, from_date=from_date, to_date=to_date)
        today = self._clock().strftime("%Y-%m-%d")
        self._mailer.send(
            to=recipient,
            subject=f"Location Tracker Report for {label}",
            html=self._render_html(label, from_date, to_date, report.summary),
            attachments=[
                Attachment(
                    filename=f"LocationReport_{label.replace(' ', '_')}_{today}.xlsx",
                    content=build_visit_workbook(report.visits),
                    mimetype=XLSX_MIMETYPE,
                )
            ],
        )
        return recipient

    @staticmethod
    def _render_html(label: str, from_date: Optional[date], to_date: Optional[date], s: VisitSummary) -> str:
        date_range = f"{from_date.isoformat() if from_date else 'All'} to {to_date.isoformat() if to_date else 'All'}"
        return f"""<!DOCTYPE html>
<html>
  <head><meta charset="utf-8"><title>Location Visit Report</title></head>
  <body style="font-family: Arial, sans-serif;">
    <h2 style="color: #3255A6;">Location Tracker Report</h2>
    <ul>
      <li><strong>User:</strong> {html.escape(label)}</li>
      <li><strong>Date Range:</strong> {date_range}</li>
      <li><strong>Total Visits:</strong> {s.total}</li>
      <li><strong>Completed:</strong> {s.completed}</li>
      <li><strong>In Progress:</strong> {s.in_progress}</li>
      <li><strong>Total Duration:</strong> {s.total_duration}</li>
      <li><strong>Mismatches:</strong> {s.mismatches}</li>
    </ul>
    <p>The attached Excel report includes full visit details with map links.</p>
  </body>
</html>
"""
