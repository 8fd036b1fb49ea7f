from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.visit_tracker.visit_tracker.container import build_container


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings)

    password = getattr(settings, "ADMIN_PASSWORD", "")
    if not password:
        raise SystemExit("ADMIN_PASSWORD must be set to seed the admin account")

    name = getattr(settings, "ADMIN_NAME", "admin")
    created = container.user_service.ensure_admin(name, password)
    migrated = container.settings_service.migrate_legacy_reminder()

    print(f"OK: admin {name!r} {'created' if created else 'already present'} -> {container.conn.describe()}")
    if migrated is not None:
        print(f"OK: migrated reminder setting to {migrated} minutes")


if __name__ == "__main__":
    main()
