from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import BACKEND_MEMORY, BACKEND_MYSQL, build_container
from .core import constants
from .database.bootstrap import apply_schema, ensure_demo_data, list_tables, seed_in_memory
from .router.controller import register as register_router

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["STORE_RETRY_ATTEMPTS"] = int(
        getattr(settings, "STORE_RETRY_ATTEMPTS", constants.DEFAULT_STORE_RETRY_ATTEMPTS)
    )

    backend = getattr(settings, "STORAGE_BACKEND", BACKEND_MYSQL)
    db_config = getattr(settings, "DB_CONFIG", None)
    logger.info("settings=%s backend=%s", settings_module, backend)

    auto_init_db = bool(getattr(settings, "AUTO_INIT_DB", False))
    auto_seed_db = bool(getattr(settings, "AUTO_SEED_DB", False))
    if backend == BACKEND_MYSQL and auto_init_db:
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
    if backend == BACKEND_MYSQL and auto_seed_db:
        ensure_demo_data(db_config)

    container = build_container(
        db_config=db_config,
        backend=backend,
        timezone=getattr(settings, "TIMEZONE", constants.DEFAULT_TIMEZONE),
        default_radius_m=float(getattr(settings, "DEFAULT_SITE_RADIUS_M", constants.DEFAULT_SITE_RADIUS_M)),
        max_accuracy_m=float(getattr(settings, "MAX_LOCATION_ACCURACY_M", constants.DEFAULT_MAX_ACCURACY_M)),
        geofence_on_clock_out=bool(getattr(settings, "GEOFENCE_ON_CLOCK_OUT", True)),
        recent_limit=int(getattr(settings, "RECENT_SESSIONS_LIMIT", constants.DEFAULT_RECENT_SESSIONS)),
        visible_limit=int(getattr(settings, "OT_VISIBLE_LIMIT", constants.DEFAULT_VISIBLE_REQUESTS)),
    )
    if backend == BACKEND_MEMORY and auto_seed_db:
        seed_in_memory(container.employees_repo, container.sites_repo)

    app.extensions["geoclock"] = container
    register_router(app, container)

    return app
