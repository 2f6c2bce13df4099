import os
from pathlib import Path

from flask import Flask

from .constants import DEFAULT_SEARCH_DEBOUNCE_MS
from .extensions import db, migrate
from .repositories.base import CategoryRepository
from .repositories.memory import InMemoryCategoryRepository
from .repositories.sql import SQLCategoryRepository
from .sample_data import build_sample_records


DATA_SOURCES = ("sql", "mock")


def create_app(test_config=None):
    app = Flask(__name__, instance_relative_config=True)

    default_sqlite_path = Path(app.instance_path) / "catalog.sqlite"

    database_uri = os.environ.get("DATABASE_URI", "")
    if not database_uri.strip():
        database_uri = f"sqlite:///{default_sqlite_path}"

    secret_key = os.environ.get("SECRET_KEY")
    if not secret_key or not secret_key.strip():
        secret_key = "dev-secret-key"

    app.config.from_mapping(
        SECRET_KEY=secret_key,
        SQLALCHEMY_DATABASE_URI=database_uri,
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        CATEGORY_DATA_SOURCE=os.environ.get("CATEGORY_DATA_SOURCE", "sql").strip().lower(),
        SEARCH_DEBOUNCE_MS=int(os.environ.get("SEARCH_DEBOUNCE_MS", DEFAULT_SEARCH_DEBOUNCE_MS)),
        LOG_LEVEL=os.environ.get("LOG_LEVEL", "INFO").upper(),
        CATEGORY_REPOSITORY=None,
    )

    # Ensure the instance folder exists so SQLite can create the database file.
    default_sqlite_path.parent.mkdir(parents=True, exist_ok=True)

    if test_config:
        app.config.update(test_config)

    configure_logging(app)
    register_extensions(app)
    register_blueprints(app)
    register_commands(app)

    return app


def configure_logging(app: Flask) -> None:
    # app.logger is the "catalog_admin" logger, so module loggers inherit its
    # level and Flask's default handler.
    app.logger.setLevel(app.config["LOG_LEVEL"])


def register_extensions(app: Flask) -> None:
    db.init_app(app)
    migrate.init_app(app, db)
    app.extensions["category_repository"] = build_repository(app)


def build_repository(app: Flask) -> CategoryRepository:
    repository = app.config.get("CATEGORY_REPOSITORY")
    if repository is not None:
        return repository
    source = app.config["CATEGORY_DATA_SOURCE"]
    if source not in DATA_SOURCES:
        raise ValueError(f"CATEGORY_DATA_SOURCE must be one of {', '.join(DATA_SOURCES)}, got {source!r}")
    if source == "mock":
        categories, product_counts = build_sample_records()
        app.logger.info("Serving %d mock categories", len(categories))
        return InMemoryCategoryRepository(categories, product_counts)
    return SQLCategoryRepository()


def register_blueprints(app: Flask) -> None:
    from .views import categories, stats

    app.register_blueprint(categories.bp)
    app.register_blueprint(stats.bp)


def register_commands(app: Flask) -> None:
    from .models import ensure_seed_data
    from .utils.category_tree import build_category_tree, format_category_tree

    @app.cli.command("seed")
    def seed() -> None:
        """Seed the database with the sample catalog categories and products."""
        created = ensure_seed_data()
        print(f"Seed data ensured ({created} categories created).")

    @app.cli.command("init-db")
    def init_db() -> None:
        """Create database tables based on the current models."""
        db.create_all()
        print("Database tables created.")

    @app.cli.command("category-tree")
    def category_tree() -> None:
        """Print the category hierarchy as an indented outline."""
        repository = app.extensions["category_repository"]
        for line in format_category_tree(build_category_tree(repository.list_all())):
            print(line)
