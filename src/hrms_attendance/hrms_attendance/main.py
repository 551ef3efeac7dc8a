from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .restrictions.controller import register as register_restrictions
from .settings.controller import register as register_settings

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "database" / "schema.sql"


def create_app() -> Flask:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    ip_bypass_enabled = bool(getattr(settings, "IP_BYPASS_ENABLED", False))

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )
    if ip_bypass_enabled:
        logger.warning("IP restriction bypass is ENABLED; IP mismatches will be recorded but not refused")

    container = build_container(db_config=db_config, ip_bypass_enabled=ip_bypass_enabled)

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(container.conn, schema_path=SCHEMA_PATH)
        logger.info("schema ready (tables=%d)", len(list_tables(container.conn)))

    register_attendance(app, container)
    register_restrictions(app, container)
    register_settings(app, container)

    return app
