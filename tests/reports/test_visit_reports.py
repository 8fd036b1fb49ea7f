from __future__ import annotations

import email
import io
from datetime import date, datetime

import openpyxl
import pytest

from src.visit_tracker.visit_tracker.common.geo import Coordinates
from src.visit_tracker.visit_tracker.core.exceptions import ValidationError
from src.visit_tracker.visit_tracker.reports.excel import SHEET_NAME, build_visit_csv, build_visit_workbook
from src.visit_tracker.visit_tracker.reports.mailer import SmtpConfig, SmtpMailer
from src.visit_tracker.visit_tracker.reports.service import ReportService
from src.visit_tracker.visit_tracker.reports.summary import (
    REPORT_COLUMNS,
    format_minutes,
    summarize_visits,
    visit_duration_label,
)
from src.visit_tracker.visit_tracker.users.service import UserService
from src.visit_tracker.visit_tracker.visits.model import Visit

HERE = Coordinates(13.0827, 80.2707)


def _visit(visit_id, check_in, check_out=None, mismatch=False, user="Alice"):
    return Visit(
        visit_id=visit_id,
        user_name=user,
        client_name="Acme",
        company_name="Acme Corp",
        check_in_time=check_in,
        check_out_time=check_out,
        location_mismatch=mismatch,
    )


def test_format_minutes():
    assert format_minutes(0) == "0h 0m"
    assert format_minutes(125) == "2h 5m"


def test_summary_counts_only_completed_durations():
    visits = [
        _visit(1, datetime(2025, 6, 2, 9, 0), datetime(2025, 6, 2, 10, 30)),
        _visit(2, datetime(2025, 6, 2, 11, 0), datetime(2025, 6, 2, 11, 45, 30), mismatch=True),
        _visit(3, datetime(2025, 6, 2, 12, 0)),
    ]

    s = summarize_visits(visits)

    assert (s.total, s.completed, s.in_progress, s.mismatches) == (3, 2, 1, 1)
    assert s.total_minutes == 135
    assert s.total_duration == "2h 15m"


def test_summary_of_nothing():
    s = summarize_visits([])
    assert s.total == 0
    assert s.total_duration == "0h 0m"


def test_duration_label_for_open_visit():
    assert visit_duration_label(_visit(1, datetime(2025, 6, 2, 9, 0))) == "In Progress"


def test_workbook_has_styled_header_and_rows():
    visits = [_visit(1, datetime(2025, 6, 2, 9, 0), datetime(2025, 6, 2, 9, 40), mismatch=True)]

    wb = openpyxl.load_workbook(io.BytesIO(build_visit_workbook(visits)))
    sheet = wb[SHEET_NAME]

    assert [c.value for c in sheet[1]] == REPORT_COLUMNS
    assert sheet["A1"].font.bold
    assert sheet.max_row == 2
    row = {h: c.value for h, c in zip(REPORT_COLUMNS, sheet[2])}
    assert row["User"] == "Alice"
    assert row["Duration"] == "0h 40m"
    assert row["Location Stat."] == "MISMATCH"


def test_csv_export_has_header():
    text = build_visit_csv([]).decode("utf-8-sig")
    assert text.splitlines()[0].split(",") == REPORT_COLUMNS


class FakeMailer:
    def __init__(self):
        self.sent = []

    def send(self, *, to, subject, html, attachments=()):
        self.sent.append({"to": to, "subject": subject, "html": html, "attachments": list(attachments)})


@pytest.fixture
def report_setup(visit_service, user_repo, visit_repo, clock):
    users = UserService(user_repo, clock=clock)
    mailer = FakeMailer()
    return ReportService(visit_service, users, mailer, clock=clock), users, mailer


def test_send_report_to_reporting_manager(report_setup, visit_service):
    reports, users, mailer = report_setup
    users.upsert(name="Alice", role="user", password="secret1", reporting_manager_email="boss@example.com")
    visit_service.check_in(user_name="Alice", client_name="Acme", company_name="Acme Corp", coordinates=HERE)

    recipient = reports.send_report(user_name="Alice", from_date=date(2025, 6, 1), to_date=date(2025, 6, 2))

    assert recipient == "boss@example.com"
    (mail,) = mailer.sent
    assert mail["subject"] == "Location Tracker Report for Alice"
    assert "Total Visits:</strong> 1" in mail["html"]
    assert mail["attachments"][0].filename == "LocationReport_Alice_2025-06-02.xlsx"


def test_send_report_for_all_users_needs_explicit_recipient(report_setup):
    reports, _, mailer = report_setup

    with pytest.raises(ValidationError, match="All Users"):
        reports.send_report(user_name="all")

    assert reports.send_report(user_name="all", recipient_email="ops@example.com") == "ops@example.com"
    assert mailer.sent[0]["attachments"][0].filename.startswith("LocationReport_All_Users_")


def test_send_report_without_manager_email(report_setup):
    reports, users, _ = report_setup
    users.upsert(name="Bob", role="user", password="secret1")

    with pytest.raises(ValidationError, match='No reporting manager email found for "Bob".'):
        reports.send_report(user_name="Bob")


class RecordingSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host, self.port = host, port
        self.calls = []
        RecordingSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user))

    def send_message(self, msg):
        self.calls.append(("send", msg))


def test_smtp_mailer_sends_multipart_message():
    config = SmtpConfig(host="smtp.test", port=587, username="key", password="secret", from_email="reports@example.com")
    mailer = SmtpMailer(config, smtp_factory=RecordingSMTP)

    mailer.send(to="boss@example.com", subject="Hi", html="<p>hello</p>")

    smtp = RecordingSMTP.instances[-1]
    assert (smtp.host, smtp.port) == ("smtp.test", 587)
    assert smtp.calls[0] == "starttls"
    assert smtp.calls[1] == ("login", "key")
    msg = smtp.calls[2][1]
    parsed = email.message_from_bytes(msg.as_bytes())
    assert parsed["To"] == "boss@example.com"
    assert parsed.is_multipart()
