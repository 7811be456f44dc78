# backend/dealership/__init__.py
import logging

from flask import Flask, request
from werkzeug.exceptions import HTTPException

from .config import Config
from .errors import DealershipError
from .extensions import db, migrate


def create_app(config_overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.people import people_bp
    from .routes.vehicles import vehicles_bp
    from .routes.expenses import expenses_bp, store_expenses_bp
    from .routes.intermediaries import intermediaries_bp
    from .routes.reports import reports_bp
    from .routes.price_reference import price_reference_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(people_bp)
    app.register_blueprint(vehicles_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(store_expenses_bp)
    app.register_blueprint(intermediaries_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(price_reference_bp)

    @app.errorhandler(DealershipError)
    def handle_domain_error(exc: DealershipError):
        if exc.status_code >= 500:
            app.logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.path, exc.message)
        return exc.to_dict(), exc.status_code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        if isinstance(exc, HTTPException):
            return {"error": exc.description, "field": None}, exc.code
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        db.session.rollback()
        return {"error": "Internal server error", "field": None}, 500

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = {
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        }
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
