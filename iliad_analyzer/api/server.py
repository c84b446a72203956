"""Flask application factory."""
from __future__ import annotations

import logging
import logging.handlers
import os
import time
from pathlib import Path
from typing import Optional

from flask import Flask, g, request
from flask_cors import CORS

from iliad_analyzer import performance_profiler
from iliad_analyzer.api.request_context import (
    REQUEST_ID_HEADER,
    RequestIdFilter,
    clear_req_id,
    new_req_id,
    set_req_id,
)
from iliad_analyzer.api.routes.core import core_bp
from iliad_analyzer.api.routes.metrics import metrics_bp
from iliad_analyzer.api.routes.speech import speech_bp
from iliad_analyzer.config import get_api_settings, get_store_settings
from iliad_analyzer.data.corpus_store import CorpusStore, get_corpus_store

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(req_id)s] %(name)s:%(lineno)d: %(message)s"


def create_app(config_overrides: Optional[dict] = None, *, store: Optional[CorpusStore] = None) -> Flask:
    """Initialize and configure the Flask application.

    Tests pass ``store`` to serve a temporary corpus instead of the configured one.
    """
    app = Flask(__name__)
    CORS(app)

    # 1. Configuration
    app.config["STARTUP_TIME"] = time.time()
    api_settings = get_api_settings()
    store_settings = get_store_settings()
    app.config["STORE_SETTINGS"] = store_settings
    if config_overrides:
        app.config.update(config_overrides)

    if not app.config.get("TESTING"):
        _configure_logging(api_settings.log_dir, api_settings.log_level)
    if api_settings.profile_metrics:
        performance_profiler.enable()
    else:
        performance_profiler.disable()

    # 2. Services
    app.config["CORPUS_STORE"] = store or get_corpus_store(app.config["STORE_SETTINGS"])

    # 3. Request correlation
    @app.before_request
    def _assign_request_id():
        g.req_id = new_req_id(request.headers.get(REQUEST_ID_HEADER))
        set_req_id(g.req_id)

    @app.after_request
    def _echo_request_id(response):
        req_id = g.get("req_id")
        if req_id:
            response.headers[REQUEST_ID_HEADER] = req_id
        return response

    @app.teardown_request
    def _clear_request_id(_exc):
        clear_req_id()

    # 4. Register Blueprints
    app.register_blueprint(core_bp)
    app.register_blueprint(metrics_bp)
    app.register_blueprint(speech_bp)

    logger.info("Iliad analyzer API initialized (store=%s)", app.config["STORE_SETTINGS"].path)
    return app


def _configure_logging(log_dir: Path, log_level: int) -> None:
    """Attach a rotating file handler for API diagnostics."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / "api.log"

    root = logging.getLogger()

    # Avoid adding duplicate handlers if re-initializing
    already_configured = any(
        isinstance(h, logging.handlers.RotatingFileHandler)
        and getattr(h, "baseFilename", "") == str(log_path.resolve())
        for h in root.handlers
    )
    if already_configured:
        return

    root.setLevel(log_level)

    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=5 * 1024 * 1024, backupCount=5
    )
    file_handler.setLevel(log_level)
    file_handler.addFilter(RequestIdFilter())
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(file_handler)


if __name__ == "__main__":
    # Dev server entry point
    app = create_app()
    port = int(os.getenv("PORT", 8000))
    app.run(host="0.0.0.0", port=port, debug=True)
