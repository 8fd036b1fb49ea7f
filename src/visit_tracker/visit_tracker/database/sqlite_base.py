from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from .connection import SQLiteConnection

IntegrityError = sqlite3.IntegrityError

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@contextmanager
def db_cursor(conn_factory: SQLiteConnection):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return dict(row) if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    return [dict(r) for r in cur.fetchall() or []]


def to_db_timestamp(value: Optional[datetime]) -> Optional[str]:
    """SQLite keeps timestamps as sortable text so range filters compare correctly."""
    if value is None:
        return None
    return value.strftime(TIMESTAMP_FORMAT)
