"""
Main Flask application factory.
"""
import logging

from flask import Flask, current_app

from directory.config import Config
from directory.database import build_engine, init_db

logger = logging.getLogger(__name__)

ENGINE_EXTENSION = "directory_engine"


def create_app(config_class=Config, engine=None):
    """
    Create and configure the Flask application.

    ``engine`` lets the caller inject an already-built pool; otherwise one is
    built from config and owned by the returned app.
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    if engine is None:
        engine = build_engine(app.config)
    app.extensions[ENGINE_EXTENSION] = engine

    # Register blueprints
    from directory.routes.main import main_bp
    from directory.routes.api import api_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp)

    if app.config.get("DB_CREATE_TABLES"):
        try:
            init_db(engine)
        except Exception as e:
            logger.error(f"Error during database initialization: {e}", exc_info=True)
            # Don't crash the app - the page and /health report storage errors per request

    return app


def get_engine():
    """Return the pooled engine owned by the current application."""
    return current_app.extensions[ENGINE_EXTENSION]
