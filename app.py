"""
Campus Portal: Flask Web Application

REST backend for students, teachers and parents: courses, grades, attendance,
leave and complaints, forum, notifications, chat, events and a credit
leaderboard. State lives in process memory.
"""

from __future__ import annotations

import os
from typing import Any

from flask import Flask, Response
from flask_cors import CORS

import database
from blueprints import register_blueprints
from errors import register_error_handlers
from extensions import limiter
from logging_config import init_logging
from push import init_push


def create_app(test_config: dict[str, Any] | None = None) -> Flask:
    app = Flask(__name__)

    # Load config
    from config import config_by_name
    if test_config is not None:
        app.config.from_object(config_by_name["testing"])
        app.config.update(test_config)
    else:
        env = os.environ.get("FLASK_ENV", "development")
        cfg = config_by_name.get(env, config_by_name["development"])
        app.config.from_object(cfg)
        if hasattr(cfg, "validate"):
            cfg.validate()

    init_logging(app)

    # In-memory store and real-time hub
    database.init_app(app)
    init_push(app)

    # Rate limiter (disabled in testing)
    limiter.init_app(app)
    if app.config.get("TESTING"):
        limiter.enabled = False

    # CORS: "*" or a comma-separated allow-list
    origins = [o.strip() for o in app.config.get("CORS_ORIGINS", "").split(",") if o.strip()]
    wildcard = "*" in origins
    CORS(
        app,
        origins="*" if wildcard else origins,
        send_wildcard=wildcard,
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        methods=["GET", "POST", "DELETE", "OPTIONS"],
    )

    register_error_handlers(app)
    register_blueprints(app)

    @app.after_request
    def set_headers(response: Response) -> Response:
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    if app.config.get("SEED_DEMO_DATA"):
        from seed_demo_data import seed
        with app.app_context():
            summary = seed(database.get_store())
        app.logger.info("Sample data initialised: %s", summary)

    return app


if __name__ == "__main__":
    application = create_app()
    application.run(debug=application.debug, port=application.config["PORT"], threaded=True)
