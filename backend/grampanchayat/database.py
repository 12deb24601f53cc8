"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine from
`settings.DATABASE_URL` (a local SQLite file by default, PostgreSQL in
deployments) and provides small helpers used by the application,
scripts and tests.
"""

import logging

from sqlalchemy import text
from sqlmodel import SQLModel, create_engine, Session

from .config import settings

logger = logging.getLogger("grampanchayat.db")


def _make_engine(url: str):
    if url.startswith("sqlite"):
        return create_engine(url, echo=False, connect_args={"check_same_thread": False})
    return create_engine(url, echo=False, pool_pre_ping=True)


engine = _make_engine(settings.DATABASE_URL)


def create_db_and_tables():
    """Create database tables using SQLModel metadata.

    Tables that already exist are left alone; `_ensure_permissions_column`
    then patches databases created before task permissions existed.
    """
    from . import models  # noqa: F401  registers the table metadata

    SQLModel.metadata.create_all(engine)
    _ensure_permissions_column()


def _ensure_permissions_column():
    """Ensure `users.permissions` exists and admins carry the wildcard.

    Idempotent: the ALTER fails harmlessly when the column is present.
    """
    with engine.connect() as conn:
        try:
            conn.exec_driver_sql("ALTER TABLE users ADD COLUMN permissions JSON")
            conn.commit()
        except Exception:
            conn.rollback()
    with engine.begin() as conn:
        conn.execute(
            text(
                "UPDATE users SET permissions = :wildcard "
                "WHERE role = 'admin' AND (permissions IS NULL OR CAST(permissions AS TEXT) IN ('[]', 'null'))"
            ),
            {"wildcard": '["*"]'},
        )


def check_connection() -> bool:
    """Run a trivial query and report whether the database answers."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("database connection ok")
        return True
    except Exception:
        logger.exception("database connection failed")
        return False


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
