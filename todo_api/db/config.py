"""Database configuration for the todo API."""
from typing import Generator
import logging

from sqlalchemy import event
from sqlmodel import Session, create_engine

from todo_api.config import get_settings

logger = logging.getLogger(__name__)

DATABASE_URL = get_settings().database_url
IS_SQLITE = DATABASE_URL.startswith("sqlite")

if DATABASE_URL.startswith("postgresql"):
    logger.info("Using PostgreSQL database")
else:
    logger.info(f"Using SQLite database: {DATABASE_URL}")

# SQLite connections are shared across FastAPI's worker threads
connect_args = {"check_same_thread": False} if IS_SQLITE else {}

engine = create_engine(DATABASE_URL, echo=False, connect_args=connect_args)

if IS_SQLITE:
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


def get_session() -> Generator[Session, None, None]:
    """Dependency for getting database sessions."""
    with Session(engine) as session:
        yield session
