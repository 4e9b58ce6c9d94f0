# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import argparse
import atexit
import importlib
import sys
from typing import Any, Protocol, cast

from flask import Flask
from pydantic import ValidationError as ConfigValidationError
from sqlalchemy.exc import SQLAlchemyError

from marketplace.domain.exceptions import InvariantViolation
from marketplace.infrastructure.container import Container
from marketplace.infrastructure.db import Database
from marketplace.shared.config import AppConfig, load_config
from marketplace.shared.errors import StorageUnavailableError, ValidationError, handle_app_error
from marketplace.shared.logging import logger, setup_logging
from marketplace.shared.middleware.error_handler import configure_error_handling
from marketplace.shared.middleware.request_logger import configure_request_logging


class _CORSCallable(Protocol):
    def __call__(self, app: Flask, **kwargs: Any) -> Any: ...


_flask_cors = importlib.import_module("flask_cors")
CORS = cast(_CORSCallable, _flask_cors.CORS)


def _register_invariant_handler(app: Flask) -> None:
    @app.errorhandler(InvariantViolation)
    def _handle_invariant(exc: InvariantViolation):
        context = {"field": exc.field} if exc.field else None
        return handle_app_error(ValidationError(context=context, message=str(exc)))


def create_app(config: AppConfig | None = None, database: Database | None = None) -> Flask:
    config = config or load_config()
    setup_logging(debug_mode=config.debug_logging)

    database = database or Database.from_config(config.database)
    container = Container(config=config, database=database)

    app = Flask(__name__)
    configure_error_handling(app, debug_mode=config.debug_logging)
    _register_invariant_handler(app)
    configure_request_logging(app, debug_mode=config.debug_logging)

    app.config.update(
        RATE_LIMIT_ENABLED=config.security.enable_rate_limit,
        RATE_LIMIT_REQUESTS=config.security.rate_limit_requests,
        RATE_LIMIT_WINDOW=config.security.rate_limit_window,
    )
    app.extensions["marketplace.container"] = container

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    CORS(app, **cors_kwargs)
    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.providers_controller.as_blueprint())

    atexit.register(container.shutdown)

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")

        resp.headers.setdefault("Referrer-Policy", "no-referrer")

        resp.headers.setdefault("X-Content-Type-Options", "nosniff")

        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")

        resp.headers.setdefault(
            "Permissions-Policy",
            "geolocation=(), microphone=(), camera=(), payment=(), usb=(), magnetometer=(), gyroscope=()",
        )

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info(f"Flask app initialized (env={config.app_env}, db={database.backend})")
    return app


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="marketplace-api", description="Marketplace HTTP API")
    parser.add_argument("--host", help="bind address (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="bind port (default: PORT or 3333)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging()

    try:
        config = load_config()
    except ConfigValidationError as exc:
        fields = ", ".join(
            str(err["loc"][-1]) if err["loc"] else "config"
            for err in exc.errors(include_url=False, include_input=False)
        )
        logger.error(f"Invalid configuration ({fields}); refusing to start")
        return 1

    database: Database | None = None
    try:
        database = Database.from_config(config.database)
        database.ping()
        database.create_schema()
    except (SQLAlchemyError, StorageUnavailableError) as exc:
        logger.error(f"Database unreachable at startup: {type(exc).__name__}: {exc}")
        if database is not None:
            database.dispose()
        return 1

    app = create_app(config, database)
    host = args.host or config.host
    port = args.port or config.port
    logger.info(f"Listening on http://{host}:{port}")
    app.run(host=host, port=port, threaded=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
