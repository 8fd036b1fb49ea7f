from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.exceptions import ConflictError
from ..database.connection import SQLiteConnection
from ..database.sqlite_base import IntegrityError, db_cursor, fetchall, fetchone, to_db_timestamp
from .model import Client
from .repository import ClientRepository


def _client_from_row(r: dict) -> Client:
    created_at = r.get("created_at")
    return Client(
        client_id=int(r["id"]),
        name=r["name"],
        company=r.get("company"),
        location=r.get("location"),
        created_at=datetime.fromisoformat(created_at) if created_at else None,
    )


class SQLiteClientRepository(ClientRepository):
    def __init__(self, conn_factory: SQLiteConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Client]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, company, location, created_at FROM clients ORDER BY name")
            return [_client_from_row(r) for r in fetchall(cur)]

    def get_by_name(self, name: str) -> Optional[Client]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, company, location, created_at FROM clients WHERE name=?", (name,))
            r = fetchone(cur)
            return _client_from_row(r) if r else None

    def create(self, *, name: str, company: Optional[str], location: Optional[str], created_at: datetime) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO clients(name, company, location, created_at) VALUES(?,?,?,?)",
                    (name, company, location, to_db_timestamp(created_at)),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            raise ConflictError(f"Client {name!r} already exists") from e

    def upsert(self, *, name: str, company: Optional[str], location: Optional[str], created_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO clients(name, company, location, created_at) VALUES(?,?,?,?)
                ON CONFLICT(name) DO UPDATE SET company=excluded.company, location=excluded.location
                """,
                (name, company, location, to_db_timestamp(created_at)),
            )

    def delete_by_name(self, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM clients WHERE name=?", (name,))
            return cur.rowcount > 0
