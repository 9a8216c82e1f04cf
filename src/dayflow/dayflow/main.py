from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .container import Container, build_container
from .core.constants import DEFAULT_BACKEND_TIMEOUT_SECONDS, DEFAULT_SIGNUP_SETTLE_SECONDS
from .database.bootstrap import apply_schema, ensure_demo_accounts, list_tables
from .employees.controller import register as register_employees
from .leave.controller import register as register_leave

logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        # Helpful startup info when pointing at the wrong database.
        if app.config["DEBUG"]:
            print(
                "[dayflow] settings=", settings_module,
                " db=", f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
            )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=ROOT_DIR / "database" / "schema.sql")
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_accounts(db_config)
            logger.info("demo accounts ready")

        container = build_container(
            db_config=db_config,
            settle_seconds=float(getattr(settings, "SIGNUP_SETTLE_SECONDS", DEFAULT_SIGNUP_SETTLE_SECONDS)),
            backend_timeout=float(getattr(settings, "BACKEND_TIMEOUT_SECONDS", DEFAULT_BACKEND_TIMEOUT_SECONDS)),
        )
        atexit.register(container.sessions.close_all)

    app.extensions["dayflow"] = container

    register_auth(app, container)
    register_employees(app, container)
    register_attendance(app, container)
    register_leave(app, container)

    return app
