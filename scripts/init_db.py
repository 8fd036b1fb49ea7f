from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.visit_tracker.visit_tracker.container import build_connection
from src.visit_tracker.visit_tracker.database.bootstrap import apply_schema, list_sqlite_tables
from src.visit_tracker.visit_tracker.database.connection import SQLiteConnection


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    conn = build_connection(settings)

    apply_schema(conn)
    print(f"OK: Applied {conn.backend} schema -> {conn.describe()}")
    if isinstance(conn, SQLiteConnection):
        print("tables:", ", ".join(list_sqlite_tables(conn)))


if __name__ == "__main__":
    main()
