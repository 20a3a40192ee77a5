import os
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()

_DRIVER_PREFIXES = (
    ("postgres://", "postgresql+psycopg://"),
    ("postgresql://", "postgresql+psycopg://"),
)


def normalize_db_url(url: str) -> str:
    """Bare postgres URLs get the psycopg 3 driver; anything else is returned as is."""
    for bare, driver in _DRIVER_PREFIXES:
        if url and url.startswith(bare):
            return driver + url[len(bare):]
    return url


def engine_options(url: str, config) -> dict:
    """Pool settings for server databases. SQLite keeps Flask-SQLAlchemy's own pool."""
    if not url or url.startswith("sqlite"):
        return {}
    return {
        "pool_pre_ping": True,
        "pool_recycle": int(config.get("DB_POOL_RECYCLE", 270)),
        "pool_size": int(config.get("DB_POOL_SIZE", 5)),
        "max_overflow": int(config.get("DB_MAX_OVERFLOW", 2)),
        "pool_timeout": 30,
    }


def init_db(app):
    # DATABASE_URL wins over any configured URI
    url = normalize_db_url(os.getenv("DATABASE_URL") or app.config.get("SQLALCHEMY_DATABASE_URI") or "")
    app.config["SQLALCHEMY_DATABASE_URI"] = url

    opts = engine_options(url, app.config)
    if opts:
        app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", opts)

    db.init_app(app)
