"""
SQLAlchemy session management for Bookify.

Creates the engine, the session factory and the declarative base for the ORM
models. Provides a dependency that opens and closes a session per request.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from bookify.core.config import settings


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """
    SQLite ignores ON DELETE CASCADE unless foreign keys are switched on for
    every connection.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=_connect_args)
enable_sqlite_foreign_keys(engine)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    """
    Provides a database session for FastAPI dependencies.

    Yields:
        Session: SQLAlchemy session, closed once the request is done.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
