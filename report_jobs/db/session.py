"""Database engine utilities and owned schema bootstrap.

This module centralizes database connectivity primitives to enforce the db-layer
boundary for all SQLAlchemy usage.
"""

from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.util.exc import CommandError
from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

_MIGRATIONS_DIRECTORY = Path(__file__).resolve().parents[2] / "alembic"


def db_create_engine(database_url: str) -> Engine:
    """Create the SQLAlchemy engine for application database access.

    In-memory SQLite URLs share one connection across threads so background
    report jobs see the same database as request handlers.

    Args:
        database_url: SQLAlchemy database URL.

    Returns:
        Engine: Configured SQLAlchemy engine.

    Raises:
        ValueError: Raised when the database URL is blank.
    """

    normalized_database_url = database_url.strip()
    if not normalized_database_url:
        raise ValueError("database_url must not be blank")

    if normalized_database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            normalized_database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if normalized_database_url.startswith("sqlite"):
        return create_engine(normalized_database_url, connect_args={"check_same_thread": False})
    return create_engine(normalized_database_url, pool_pre_ping=True)


def db_build_migration_config(database_url: str | None = None) -> Config:
    """Build an Alembic config pointing at the bundled migration scripts.

    Args:
        database_url: Optional SQLAlchemy URL; env.py falls back to settings when omitted.

    Returns:
        Config: Alembic configuration without logging side effects.
    """

    migration_config = Config()
    migration_config.set_main_option("script_location", str(_MIGRATIONS_DIRECTORY))
    if database_url is not None:
        migration_config.set_main_option("sqlalchemy.url", database_url)
    return migration_config


def db_ensure_schema(engine: Engine) -> None:
    """Upgrade the owned `report_job` schema to the latest Alembic revision.

    Runs the migrations on a connection from `engine`, so in-memory SQLite
    engines get the same schema as file or server databases.

    Args:
        engine: SQLAlchemy engine instance.

    Returns:
        None: Schema is migrated as a side effect.

    Raises:
        RuntimeError: Raised when migration execution fails.
    """

    migration_config = db_build_migration_config()
    try:
        with engine.begin() as connection:
            migration_config.attributes["connection"] = connection
            command.upgrade(migration_config, "head")
    except (CommandError, SQLAlchemyError) as error:
        raise RuntimeError("failed to migrate report_job schema") from error
