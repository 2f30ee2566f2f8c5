from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from pathlib import Path
from types import ModuleType
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers, register_request_logging
from .container import Container, build_container
from .core.constants import DEFAULT_MATCH_PROBABILITY, DEFAULT_SESSION_DAYS, DEFAULT_STORE_TIMEOUT_SECONDS
from .core.enums import StorageBackend
from .core.exceptions import DuplicateEmail
from .database.bootstrap import DEMO_ACCOUNTS, apply_schema, ensure_demo_users, list_tables
from .logging_setup import configure_logging
from .reports.controller import register as register_reports
from .roster.controller import register as register_roster
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _seed_memory_accounts(container: Container) -> None:
    for full_name, email, password, role in DEMO_ACCOUNTS:
        try:
            container.auth_service.register(email, password, full_name, role)
        except DuplicateEmail:
            logger.info("Demo account already exists: %s", email)


def create_app(settings: Optional[ModuleType] = None, *, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    if settings is None:
        settings_module = get_settings_module()
        settings = importlib.import_module(settings_module)
    else:
        settings_module = settings.__name__

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    backend = StorageBackend(getattr(settings, "STORAGE_BACKEND", StorageBackend.MYSQL.value))
    db_config = getattr(settings, "DB_CONFIG", None)
    logger.info(
        "settings=%s backend=%s%s",
        settings_module,
        backend.value,
        f" db={db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
        if backend == StorageBackend.MYSQL and db_config
        else "",
    )

    auto_init_db = bool(getattr(settings, "AUTO_INIT_DB", False))
    auto_seed_db = bool(getattr(settings, "AUTO_SEED_DB", False))
    if backend == StorageBackend.MYSQL and auto_init_db:
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
    if backend == StorageBackend.MYSQL and auto_seed_db:
        created = ensure_demo_users(db_config)
        logger.info("demo seed ready (created=%s)", created)

    if container is None:
        container = build_container(
            db_config=db_config,
            backend=backend,
            timeout_seconds=float(getattr(settings, "STORE_TIMEOUT_SECONDS", DEFAULT_STORE_TIMEOUT_SECONDS)),
            match_probability=float(getattr(settings, "RECOGNITION_MATCH_PROBABILITY", DEFAULT_MATCH_PROBABILITY)),
        )
    if backend == StorageBackend.MEMORY and auto_seed_db:
        _seed_memory_accounts(container)
    app.extensions["smart_attendance"] = container

    CORS(
        app,
        resources={r"/api/*": {"origins": getattr(settings, "CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )
    register_error_handlers(app)
    register_request_logging(app)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok", "backend": container.backend.value})

    register_users(app, container)
    register_roster(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
