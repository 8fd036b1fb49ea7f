from __future__ import annotations

from pathlib import Path
from typing import Iterable, Union

import mysql.connector

from .connection import DatabaseConnection, DBConfig, SQLiteConnection

SCHEMA_DIR = Path(__file__).resolve().parent
MYSQL_SCHEMA = SCHEMA_DIR / "schema_mysql.sql"
SQLITE_SCHEMA = SCHEMA_DIR / "schema_sqlite.sql"


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes, skips '--' lines).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]
    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_mysql_database(config: DBConfig) -> None:
    conn = mysql.connector.connect(
        host=config.host,
        port=config.port,
        user=config.user,
        password=config.password,
        use_pure=True,
    )
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_mysql_schema(config: DBConfig, *, schema_path: str | Path = MYSQL_SCHEMA) -> None:
    ensure_mysql_database(config)
    sql = Path(schema_path).read_text(encoding="utf-8")

    conn = mysql.connector.connect(
        host=config.host,
        port=config.port,
        user=config.user,
        password=config.password,
        database=config.database,
        use_pure=True,
    )
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def apply_sqlite_schema(conn_factory: SQLiteConnection, *, schema_path: str | Path = SQLITE_SCHEMA) -> None:
    sql = Path(schema_path).read_text(encoding="utf-8")
    conn = conn_factory.connect()
    try:
        conn.executescript(sql)
        conn.commit()
    finally:
        conn.close()


def list_sqlite_tables(conn_factory: SQLiteConnection) -> list[str]:
    conn = conn_factory.connect()
    try:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name")
        return [r[0] for r in rows]
    finally:
        conn.close()


def apply_schema(conn_factory: Union[DatabaseConnection, SQLiteConnection]) -> None:
    """Create every table for whichever backend the factory points at."""
    if isinstance(conn_factory, SQLiteConnection):
        apply_sqlite_schema(conn_factory)
    else:
        apply_mysql_schema(conn_factory.config)
