# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import click
from flask import Flask
from flask_cors import CORS

from socialauth.infrastructure.container import Container
from socialauth.infrastructure.db import build_engine, init_db
from socialauth.shared.config import AppConfig, load_config
from socialauth.shared.logging import logger, setup_logging
from socialauth.shared.middleware.error_handler import configure_error_handling
from socialauth.shared.middleware.request_logger import configure_request_logging


def get_container(app: Flask) -> Container:
    return app.extensions["socialauth"]


def _register_cli(app: Flask, container: Container) -> None:
    @app.cli.command("purge-sessions")
    def purge_sessions() -> None:
        """Delete every expired session from the session store."""
        removed = container.session_manager.purge_expired()
        click.echo(f"purged {removed} expired sessions")


def create_app(config: AppConfig | None = None) -> Flask:
    config = config or load_config()
    setup_logging(config.log_level, debug_mode=config.debug_logging, log_file=config.log_file)

    engine = build_engine(config.database)
    init_db(engine)
    container = Container(config=config, engine=engine)

    app = Flask(__name__)
    app.extensions["socialauth"] = container
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)

    CORS(
        app,
        resources={r"/api/*": {"origins": config.security.allowed_origins}},
        supports_credentials="*" not in config.security.allowed_origins,
    )

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.users_controller.as_blueprint())
    _register_cli(app, container)

    @app.after_request
    def _add_security_headers(resp):
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

    logger.info(
        f"Flask app initialized env={config.app_env} sessions={config.session.backend}"
    )
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=8080, debug=False, threaded=True)
