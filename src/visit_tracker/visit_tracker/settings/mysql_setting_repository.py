from __future__ import annotations

from typing import Dict, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .repository import SettingRepository


class MySQLSettingRepository(SettingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT setting_value FROM settings WHERE setting_key=%s", (key,))
            r = fetchone(cur)
            return r["setting_value"] if r else None

    def set(self, key: str, value: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO settings(setting_key, setting_value) VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE setting_value=VALUES(setting_value)
                """,
                (key, value),
            )

    def all(self) -> Dict[str, str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT setting_key, setting_value FROM settings ORDER BY setting_key")
            return {r["setting_key"]: r["setting_value"] for r in fetchall(cur)}
