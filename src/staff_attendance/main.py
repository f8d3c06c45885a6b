from __future__ import annotations

import importlib
import logging
from decimal import Decimal
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, render_template, session

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.auth import current_user, is_manager
from .container import Container, build_container
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, ensure_demo_data, list_tables
from .database.connection import DBConfig
from .notifications.controller import register as register_notifications
from .payroll.controller import register as register_payroll
from .qr.controller import register as register_qr
from .reports.controller import register as register_reports
from .users.controller import register as register_users

ROOT_DIR = Path(__file__).resolve().parents[2]


def _configure_logging(app: Flask, level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    app.logger.setLevel(level)


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder=str(ROOT_DIR / "templates"))

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    _configure_logging(app, getattr(settings, "LOG_LEVEL", "INFO"))

    db_config = getattr(settings, "DB_CONFIG")
    app.logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=ROOT_DIR / "database" / "schema.sql")
            app.logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_data(db_config, access_pin=getattr(settings, "QR_ACCESS_PIN", ""))

        container = build_container(
            db_config=db_config,
            qr_secret=getattr(settings, "QR_SECRET"),
            regular_rate=Decimal(str(getattr(settings, "DEFAULT_REGULAR_RATE", "18.50"))),
            overtime_rate=Decimal(str(getattr(settings, "DEFAULT_OVERTIME_RATE", "27.75"))),
            nominal_rate=Decimal(str(getattr(settings, "DASHBOARD_NOMINAL_RATE", "18.50"))),
        )

    @app.context_processor
    def inject_layout():
        unread = 0
        if "user_id" in session:
            try:
                unread = container.notification_service.counts(int(session["user_id"])).unread
            except Exception:
                # badge only, the page itself still renders
                app.logger.exception("Failed to count unread notifications")
        return {"current_user": current_user(), "is_manager": is_manager(), "unread_count": unread}

    register_users(app, container)
    register_dashboard(app, container)
    register_attendance(app, container)
    register_qr(app, container)
    register_payroll(app, container)
    register_reports(app, container)
    register_notifications(app, container)

    @app.errorhandler(404)
    def not_found(_error):
        return render_template("404.html"), 404

    return app
