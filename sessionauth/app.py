# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask, Response
from flask_cors import CORS

from sessionauth.container import Container
from sessionauth.shared.config import AppConfig, load_config
from sessionauth.shared.logging import logger, setup_logging
from sessionauth.shared.middleware.error_handler import configure_error_handling
from sessionauth.shared.middleware.request_logger import configure_request_logging


def create_app(
    config: AppConfig | None = None,
    *,
    container: Container | None = None,
    init_schema: bool = True,
) -> Flask:
    config = config or (container.config if container else load_config())
    container = container or Container(config)

    setup_logging(config.log_level, log_file=config.log_file, debug_mode=config.debug_logging)
    if init_schema:
        container.database.init_db()

    app = Flask(__name__)
    app.extensions["sessionauth.container"] = container
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    app.register_blueprint(container.session_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp: Response) -> Response:
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )

        return resp

    logger.info("Flask app initialized")
    return app
