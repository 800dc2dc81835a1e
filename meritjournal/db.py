"""
Merit Journal database connection
"""
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from .utils.settings import (
    MERITJOURNAL_DB_URI,
    MERITJOURNAL_DB_POOL_RECYCLE_SECONDS,
    MERITJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS,
    MERITJOURNAL_DB_POOL_SIZE,
    MERITJOURNAL_DB_MAX_OVERFLOW,
)


def create_meritjournal_engine(
    url: Optional[str],
    pool_size: int,
    max_overflow: int,
    statement_timeout: int,
    pool_recycle: int = MERITJOURNAL_DB_POOL_RECYCLE_SECONDS,
):
    if url is not None and url.startswith("sqlite"):
        # One shared connection, otherwise every in-memory connection is a new database
        return create_engine(
            url=url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    # Pooling: https://docs.sqlalchemy.org/en/20/core/pooling.html#sqlalchemy.pool.QueuePool
    # Statement timeout: https://stackoverflow.com/a/44936982
    return create_engine(
        url=url,
        pool_size=pool_size,
        pool_recycle=pool_recycle,
        max_overflow=max_overflow,
        connect_args={"options": f"-c statement_timeout={statement_timeout}"},
    )


engine = create_meritjournal_engine(
    url=MERITJOURNAL_DB_URI,
    pool_size=MERITJOURNAL_DB_POOL_SIZE,
    max_overflow=MERITJOURNAL_DB_MAX_OVERFLOW,
    statement_timeout=MERITJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS,
    pool_recycle=MERITJOURNAL_DB_POOL_RECYCLE_SECONDS,
)
SessionLocal = sessionmaker(bind=engine)


def yield_connection_from_env() -> Session:
    """
    Yields a database connection (created using environment variables). As per FastAPI docs:
    https://fastapi.tiangolo.com/tutorial/sql-databases/#create-a-dependency
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


yield_connection_from_env_ctx = contextmanager(yield_connection_from_env)
