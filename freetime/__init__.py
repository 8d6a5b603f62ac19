# freetime/__init__.py
from flask import Flask
from flask_migrate import Migrate
from freetime.config import Config
from freetime.routes import register_blueprints
from freetime.utils.logger import setup_logging
from freetime.db_models import db
from freetime.services.interval_store import MemoryIntervalStore, UserLocks
from freetime.services.sql_store import SqlIntervalStore

migrate = Migrate()


def build_store(app):
    backend = app.config.get("INTERVAL_STORE", "sql")
    if backend == "memory":
        return MemoryIntervalStore(UserLocks())
    if backend == "sql":
        return SqlIntervalStore(UserLocks())
    raise ValueError(f"Unknown INTERVAL_STORE backend: {backend!r}")


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)
    app.secret_key = app.config["SECRET_KEY"]

    db.init_app(app)
    migrate.init_app(app, db)
    setup_logging(app)
    app.extensions["interval_store"] = build_store(app)
    register_blueprints(app)

    return app
