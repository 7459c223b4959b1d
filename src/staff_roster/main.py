from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .assignments.controller import register as register_assignments
from .attendance.controller import register as register_attendance
from .config import get_settings_module
from .conflicts.controller import register as register_conflicts
from .container import Container, build_container
from .core.exceptions import (
    ConflictError,
    DomainError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    UnavailableError,
    ValidationError,
)
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .shifts.controller import register as register_shifts
from .users.controller import register as register_staff

logger = logging.getLogger(__name__)

_DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"

_STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (ValidationError, 400),
    (InvalidStateError, 400),
    (ForbiddenError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        for cls, status in _STATUS_BY_ERROR:
            if isinstance(e, cls):
                break
        else:
            status = 400
        logger.info("rejected %s: %s", type(e).__name__, e)
        return jsonify({"error": str(e), "kind": type(e).__name__}), status

    @app.errorhandler(UnavailableError)
    def handle_unavailable(e: UnavailableError):
        logger.error("persistence unavailable: %s", e.__cause__ or e)
        return jsonify({"error": "Service temporarily unavailable", "kind": "UnavailableError"}), 503

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.description}), e.code


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=_DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=_DATABASE_DIR / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", 5)),
            overlap_inclusive=bool(getattr(settings, "OVERLAP_INCLUSIVE", True)),
            conflict_scan_days=int(getattr(settings, "CONFLICT_SCAN_DAYS", 7)),
        )

    _register_error_handlers(app)

    register_shifts(app, container)
    register_assignments(app, container)
    register_conflicts(app, container)
    register_attendance(app, container)
    register_staff(app, container)

    @app.route("/health")
    def health_check():
        return jsonify({"status": "ok"})

    return app
