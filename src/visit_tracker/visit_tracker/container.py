from __future__ import annotations

import functools
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Union

from .clients.mysql_client_repository import MySQLClientRepository
from .clients.repository import ClientRepository
from .clients.service import ClientService
from .clients.sqlite_client_repository import SQLiteClientRepository
from .common.datetime_utils import now_local
from .database.connection import DatabaseConnection, DBConfig, SQLiteConnection
from .geocoding.client import GoogleGeocodingClient
from .reports.mailer import SmtpConfig, SmtpMailer
from .reports.service import ReportService
from .settings.mysql_setting_repository import MySQLSettingRepository
from .settings.repository import SettingRepository
from .settings.service import SettingsService
from .settings.sqlite_setting_repository import SQLiteSettingRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .users.sqlite_user_repository import SQLiteUserRepository
from .visits.mysql_visit_repository import MySQLVisitRepository
from .visits.repository import VisitRepository
from .visits.service import VisitService
from .visits.sqlite_visit_repository import SQLiteVisitRepository


@dataclass(frozen=True)
class Container:
    conn: Union[DatabaseConnection, SQLiteConnection]

    users_repo: UserRepository
    visits_repo: VisitRepository
    clients_repo: ClientRepository
    settings_repo: SettingRepository

    auth_service: AuthService
    user_service: UserService
    visit_service: VisitService
    client_service: ClientService
    settings_service: SettingsService
    report_service: ReportService
    geocoder: GoogleGeocodingClient


def build_connection(settings: Any) -> Union[DatabaseConnection, SQLiteConnection]:
    backend = str(getattr(settings, "DB_BACKEND", "mysql")).lower()
    if backend == "sqlite":
        return SQLiteConnection(getattr(settings, "SQLITE_PATH", "visit_tracker.db"))
    if backend == "mysql":
        return DatabaseConnection(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
    raise ValueError(f"Unsupported DB_BACKEND: {backend!r}")


def build_container(settings: Any) -> Container:
    """Wire every collaborator explicitly from a settings object (module or namespace)."""
    conn = build_connection(settings)
    clock: Callable[[], datetime] = functools.partial(now_local, getattr(settings, "APP_TIMEZONE", "Asia/Kolkata"))

    if isinstance(conn, SQLiteConnection):
        users_repo = SQLiteUserRepository(conn)
        visits_repo = SQLiteVisitRepository(conn)
        clients_repo = SQLiteClientRepository(conn)
        settings_repo = SQLiteSettingRepository(conn)
    else:
        users_repo = MySQLUserRepository(conn)
        visits_repo = MySQLVisitRepository(conn)
        clients_repo = MySQLClientRepository(conn)
        settings_repo = MySQLSettingRepository(conn)

    settings_service = SettingsService(settings_repo)
    auth_service = AuthService(users_repo)
    user_service = UserService(users_repo, clock=clock)
    visit_service = VisitService(visits_repo, clients_repo, settings_service, clock=clock)
    client_service = ClientService(clients_repo, clock=clock)

    mailer = SmtpMailer(
        SmtpConfig(
            host=getattr(settings, "SMTP_HOST", "in-v3.mailjet.com"),
            port=int(getattr(settings, "SMTP_PORT", 587)),
            username=getattr(settings, "SMTP_USERNAME", None),
            password=getattr(settings, "SMTP_PASSWORD", None),
            from_email=getattr(settings, "SMTP_FROM_EMAIL", "no-reply@example.com"),
            use_tls=bool(getattr(settings, "SMTP_USE_TLS", True)),
        )
    )
    report_service = ReportService(visit_service, user_service, mailer, clock=clock)
    geocoder = GoogleGeocodingClient(
        getattr(settings, "GOOGLE_MAPS_API_KEY", None),
        timeout=float(getattr(settings, "GEOCODING_TIMEOUT_SECONDS", 10)),
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        visits_repo=visits_repo,
        clients_repo=clients_repo,
        settings_repo=settings_repo,
        auth_service=auth_service,
        user_service=user_service,
        visit_service=visit_service,
        client_service=client_service,
        settings_service=settings_service,
        report_service=report_service,
        geocoder=geocoder,
    )
