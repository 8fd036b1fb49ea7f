from __future__ import annotations

import importlib
import logging
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .container import Container, build_container
from .core.exceptions import DomainError, ExternalServiceError
from .database.bootstrap import apply_schema
from .clients.controller import register as register_clients
from .geocoding.controller import register as register_geocoding
from .reports.controller import register as register_reports
from .settings.controller import register as register_settings
from .users.controller import register as register_users
from .visits.controller import register as register_visits

logger = logging.getLogger(__name__)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        body = {"success": False, "error": e.kind, "message": str(e)}
        if isinstance(e, ExternalServiceError) and e.upstream_status:
            body["upstreamStatus"] = e.upstream_status
        return jsonify(body), e.http_status

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("unhandled error")
        return jsonify({"success": False, "error": "internal_error", "message": "Internal server error"}), 500


def bootstrap_data(container: Container, settings: Any) -> None:
    """Idempotent startup data steps: legacy setting migration and the seed admin."""
    container.settings_service.migrate_legacy_reminder()

    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        name = getattr(settings, "ADMIN_NAME", "admin")
        password = getattr(settings, "ADMIN_PASSWORD", "")
        if not password:
            logger.warning("AUTO_SEED_DB is set but ADMIN_PASSWORD is empty; no admin seeded")
        elif container.user_service.ensure_admin(name, password):
            logger.info("seeded admin account %r", name)


def create_app(settings: Optional[Any] = None) -> Flask:
    load_dotenv(override=False)
    if settings is None:
        settings = importlib.import_module(get_settings_module())

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    container = build_container(settings)
    logger.info("visit-tracker starting: db=%s", container.conn.describe())

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(container.conn)
        logger.info("schema ready (%s)", container.conn.backend)
    bootstrap_data(container, settings)

    app.extensions["visit_tracker"] = container
    _register_error_handlers(app)

    register_users(app, container)
    register_visits(app, container)
    register_clients(app, container)
    register_settings(app, container)
    register_geocoding(app, container)
    register_reports(app, container)

    return app
