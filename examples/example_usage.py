"""Drive the visit lifecycle through the service layer, without Flask.

Controllers stay thin; the rules live in the services wired by ``build_container``.
"""

import importlib

from dotenv import load_dotenv

from config import get_settings_module

from src.visit_tracker.visit_tracker.common.geo import Coordinates
from src.visit_tracker.visit_tracker.container import build_container
from src.visit_tracker.visit_tracker.database.bootstrap import apply_schema


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings)
    apply_schema(container.conn)

    visits = container.visit_service
    opened = visits.check_in(
        user_name="demo",
        client_name="Acme",
        company_name="Acme Corp",
        coordinates=Coordinates(13.0827, 80.2707),
    )
    closed = visits.check_out(opened.visit.visit_id, coordinates=Coordinates(13.0927, 80.2807))
    print(closed.visit.as_api_dict())


if __name__ == "__main__":
    main()
