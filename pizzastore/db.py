"""
Database configuration and session management
"""
import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Session factory, bound by init_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False)

# Base class for models
Base = declarative_base()

engine: Optional[Engine] = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(database_url: str) -> Engine:
    """Create an engine with settings suited to the dialect in the URL."""
    engine_kwargs = {"pool_pre_ping": True}

    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        # in-memory databases live inside a single connection
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs.update({
            "pool_recycle": 3600,
            "pool_size": 1,
            "max_overflow": 0,
            "connect_args": {"connect_timeout": 30},
        })

    new_engine = create_engine(database_url, **engine_kwargs)
    if database_url.startswith("sqlite"):
        event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)
    return new_engine


def init_engine(database_url: str) -> Engine:
    """Create the process-wide engine and bind the session factory to it."""
    global engine
    engine = make_engine(database_url)
    SessionLocal.configure(bind=engine)
    return engine


def wait_for_connection(db_engine: Engine, retries: int = 1, delay: int = 5) -> None:
    """
    Check that the database answers, retrying on connection errors.

    Raises the last OperationalError when every attempt fails.
    """
    for attempt in range(1, retries + 1):
        try:
            with db_engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return
        except OperationalError:
            if attempt >= retries:
                raise
            logger.warning(
                f"Database connection failed (attempt {attempt}/{retries}), "
                f"retrying in {delay} seconds")
            time.sleep(delay)


def dispose_engine() -> None:
    global engine
    if engine is not None:
        engine.dispose()
        engine = None


@contextmanager
def get_db() -> Iterator[Session]:
    """Database session scope"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
