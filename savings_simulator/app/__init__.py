"""Application factory and app-wide configuration."""

import uuid
from typing import Optional

from flask import Flask, g, request
from flask_cors import CORS

from savings_simulator.app.api.routes import api_bp
from savings_simulator.config import Settings, load_settings
from savings_simulator.domain.catalog import default_catalog, load_catalog
from savings_simulator.utils.logging import get_logger, set_request_id, setup_logging

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Build the Flask app instance."""
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    app.config["CATALOG"] = (
        load_catalog(settings.catalog_path) if settings.catalog_path else default_catalog()
    )

    CORS(
        app,
        resources={r"/api/*": {"origins": list(settings.cors_origins)}},
        supports_credentials=True,
    )

    @app.before_request
    def _assign_request_id() -> None:
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        set_request_id(g.request_id)

    @app.after_request
    def _echo_request_id(response):
        response.headers["X-Request-ID"] = g.get("request_id", "-")
        return response

    app.register_blueprint(api_bp, url_prefix="/api")
    logger.info(
        "app ready env=%s products=%d",
        settings.env,
        len(app.config["CATALOG"]),
    )
    return app
