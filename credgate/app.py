# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import atexit
import sys

from flask import Flask
from pydantic import ValidationError

from credgate.container import Container
from credgate.infrastructure.db import init_db
from credgate.infrastructure.observability import configure_metrics
from credgate.shared.config import AppConfig, load_config
from credgate.shared.logging import logger, setup_logging
from credgate.shared.middleware.error_handler import configure_error_handling
from credgate.shared.middleware.request_logger import configure_request_logging


def create_app(config: AppConfig | None = None, *, container: Container | None = None) -> Flask:
    if container is None:
        container = Container(config or load_config())
    config = container.config

    configure_metrics(config.observability.metrics_enabled)
    init_db(container.engine)

    app = Flask(__name__)
    app.extensions["credgate"] = container
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("Cache-Control", "no-store")
        return resp

    logger.info(f"Flask app initialized ({config.observability.service_name})")
    return app


def main() -> None:
    try:
        config = load_config()
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        print(
            "\n❌ Invalid configuration: "
            f"{', '.join(fields) or 'unknown'}\n"
            "   DATABASE_URL and JWT_SECRET must be set (see .env).\n",
            file=sys.stderr,
        )
        sys.exit(1)

    setup_logging(config.log_level)
    container = Container(config)
    atexit.register(container.close)

    app = create_app(container=container)
    logger.info(f"Server starting on {config.host}:{config.port}")
    app.run(host=config.host, port=config.port, threaded=True)


if __name__ == "__main__":
    main()
