from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.exceptions import (
    DomainError,
    NotFoundError,
    OpenRecordsRemainError,
    SessionClosedError,
    ValidationError,
)
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .database.connection import DBConfig
from .logging_utils import setup_logging
from .reports.controller import register as register_reports
from .roster.controller import register as register_roster

logger = logging.getLogger(__name__)

_REPO_ROOT = Path(__file__).resolve().parents[3]


def _register_error_handlers(app: Flask) -> None:
    def _error(message: str, status: int, **extra):
        return jsonify({"success": False, "message": message, **extra}), status

    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return _error(str(e), 400)

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return _error(str(e), 404)

    @app.errorhandler(SessionClosedError)
    def _closed(e: SessionClosedError):
        return _error(str(e), 409)

    @app.errorhandler(OpenRecordsRemainError)
    def _open_records(e: OpenRecordsRemainError):
        return _error(str(e), 409, open_records=e.count)

    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return _error(str(e), 400)


def create_app(container: Optional[Container] = None) -> Flask:
    """App factory. Pass a container to run without MySQL (tests, demos)."""
    from config import get_settings_module

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), json_output=bool(getattr(settings, "LOG_JSON", False)))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "startup",
            extra={
                "settings": settings_module,
                "db": DBConfig.from_dict(db_config).dsn,
            },
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=_REPO_ROOT / "database" / "schema.sql")
            logger.info("schema_ready", extra={"tables": len(list_tables(db_config))})
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=_REPO_ROOT / "database" / "seed.sql")
            logger.info("seed_ready")

        container = build_container(
            db_config=db_config,
            shift_bands=getattr(settings, "SHIFT_BANDS", None),
            shift_cutover=getattr(settings, "SHIFT_CUTOVER", None),
            group_scope=getattr(settings, "GROUP_SCOPE", None),
        )

    app.extensions["sewa_duty"] = container
    _register_error_handlers(app)

    register_roster(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
