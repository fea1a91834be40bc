import atexit
import logging

import click
from flask import Flask, render_template

from .config import Config
from .database import HistoryStore, create_db_engine, init_schema
from .logging_config import setup_logging
from .views import bp

logger = logging.getLogger(__name__)


def create_app(config=None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    if not app.testing:
        setup_logging(app.config["LOG_LEVEL"], app.config["LOG_FORMAT"])

    engine = create_db_engine(app.config["DATABASE_URL"])
    store = HistoryStore(engine)
    app.extensions["history_store"] = store
    if not app.testing:
        atexit.register(store.dispose)

    create_schema = app.config["CREATE_SCHEMA"]
    if create_schema is None:
        create_schema = engine.dialect.name == "sqlite"
    if create_schema:
        init_schema(engine)

    app.register_blueprint(bp)
    register_error_handlers(app)

    @app.cli.command("init-db")
    def init_db_command():
        """Create the urls and url_checks tables."""
        init_schema(engine)
        click.echo("Database initialized.")

    return app


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(404)
    def not_found(error):
        return render_template("errors/404.html"), 404

    @app.errorhandler(500)
    def internal_error(error):
        logger.error("Unhandled error: %s", error)
        return render_template("errors/500.html"), 500
