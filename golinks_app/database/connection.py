"""
Database engine, session factory and declarative base.

Schema evolution is additive only: `init_db` creates missing tables and adds
missing nullable columns to existing ones, it never drops anything.
"""

import logging

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from golinks_app.config import settings

logger = logging.getLogger(__name__)


def _connect_args(database_url: str) -> dict:
    # SQLite connections are shared across FastAPI's worker threads
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.database_url,
    connect_args=_connect_args(settings.database_url),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """Turn on FK enforcement for SQLite connections (off by default)"""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db():
    """
    FastAPI dependency yielding one session per request.

    The session is always closed; uncommitted work is discarded.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def add_missing_columns(bind: Engine) -> list:
    """
    Add columns declared on the models but absent from existing tables.

    Only nullable columns can be added this way, which is what keeps the
    migration backward compatible with rows written by older versions.

    Returns:
        List of "table.column" names that were added
    """
    inspector = inspect(bind)
    existing_tables = set(inspector.get_table_names())
    added = []

    with bind.begin() as conn:
        for table in Base.metadata.sorted_tables:
            if table.name not in existing_tables:
                continue
            present = {column["name"] for column in inspector.get_columns(table.name)}
            for column in table.columns:
                if column.name in present:
                    continue
                if not column.nullable:
                    logger.warning(
                        "Cannot add NOT NULL column %s.%s without a rebuild",
                        table.name, column.name,
                    )
                    continue
                column_type = column.type.compile(dialect=bind.dialect)
                conn.execute(text(
                    f'ALTER TABLE {table.name} ADD COLUMN "{column.name}" {column_type}'
                ))
                added.append(f"{table.name}.{column.name}")
                logger.info("Added column %s.%s", table.name, column.name)

    return added


def init_db(bind: Engine = engine) -> None:
    """Create tables and apply additive column migrations"""
    # Import models so they're registered with Base
    import golinks_app.models  # noqa: F401

    Base.metadata.create_all(bind=bind)
    add_missing_columns(bind)
