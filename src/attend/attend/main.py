from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .checkin.controller import register as register_checkin
from .checkin.model import EligibilityConfig
from .container import Container, build_container
from .core.enums import AccuracyPolicy
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables

logger = logging.getLogger(__name__)


def eligibility_config_from(settings) -> EligibilityConfig:
    return EligibilityConfig(
        early_open_minutes=int(getattr(settings, "CHECKIN_EARLY_OPEN_MINUTES", 0)),
        late_close_minutes=int(getattr(settings, "CHECKIN_LATE_CLOSE_MINUTES", 0)),
        accuracy_policy=AccuracyPolicy(getattr(settings, "GEOFENCE_ACCURACY_POLICY", AccuracyPolicy.IGNORE.value)),
        enforce_assignments=bool(getattr(settings, "CHECKIN_ENFORCE_ASSIGNMENTS", True)),
        enforce_overrides=bool(getattr(settings, "CHECKIN_ENFORCE_OVERRIDES", True)),
    )


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        database_dir = Path(__file__).resolve().parents[3] / "database"
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=database_dir / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=database_dir / "seed.sql")
            logger.info("demo seed ready")

        late_after = getattr(settings, "CHECKIN_LATE_AFTER_MINUTES", None)
        container = build_container(
            db_config=db_config,
            eligibility=eligibility_config_from(settings),
            late_after_minutes=int(late_after) if late_after is not None else None,
            deadline_seconds=float(getattr(settings, "CHECKIN_DEADLINE_SECONDS", 10.0)),
        )

    app.extensions["attend.container"] = container
    register_checkin(app, container)

    @app.route("/health", endpoint="health")
    def health():
        return jsonify({"status": "ok"}), 200

    return app
