"""Database connection, session management and transaction boundaries"""
import functools
import sqlite3
from datetime import datetime
from decimal import Decimal
from typing import Callable, Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
import logging

from storefront.db.tables import metadata

logger = logging.getLogger(__name__)

engine: Optional[Engine] = None
SessionLocal: Optional[sessionmaker] = None

_TX_DEPTH = "storefront.tx_depth"
_AFTER_COMMIT = "storefront.after_commit"


def init_database(database_url: str, pool_size: int = 5, max_overflow: int = 10) -> Engine:
    """Initialize database connection"""
    global engine, SessionLocal

    logger.info("Initializing database connection")

    if database_url.startswith("sqlite"):
        # Local runs and tests: one shared in-process connection
        sqlite3.register_adapter(Decimal, str)
        sqlite3.register_adapter(datetime, lambda value: value.isoformat())
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False
        )
    else:
        engine = create_engine(
            database_url,
            pool_pre_ping=True,
            pool_size=pool_size,
            max_overflow=max_overflow,
            echo=False
        )

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    logger.info("Database connection initialized")

    return engine


def create_tables():
    """Create all tables"""
    logger.info("Creating database tables")
    metadata.create_all(bind=engine)
    logger.info("Database tables created")


def drop_tables():
    """Drop all tables"""
    logger.warning("Dropping database tables")
    metadata.drop_all(bind=engine)


def check_connection() -> None:
    """Run a trivial statement, raising if the database is unreachable"""
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))


def get_db() -> Generator[Session, None, None]:
    """Dependency for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def after_commit(db: Session, callback: Callable[[], None]) -> None:
    """
    Run ``callback`` once the surrounding transaction has committed

    Callbacks registered in a transaction that rolls back are dropped.
    Outside a transaction the callback runs immediately.
    """
    if db.info.get(_TX_DEPTH, 0) == 0:
        callback()
        return
    db.info.setdefault(_AFTER_COMMIT, []).append(callback)


def transactional(func: Optional[Callable] = None, *, read_only: bool = False):
    """
    Run a service function inside a transaction on its ``db`` argument

    The session must be the first positional argument. The outermost
    transactional call commits on success (or rolls back when
    ``read_only``) and rolls back on any exception; nested calls join the
    outer transaction. ``after_commit`` callbacks run after the outermost
    commit.
    """
    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(db: Session, *args, **kwargs):
            depth = db.info.get(_TX_DEPTH, 0)
            db.info[_TX_DEPTH] = depth + 1
            try:
                result = fn(db, *args, **kwargs)
                if depth == 0:
                    if read_only:
                        db.rollback()
                    else:
                        db.commit()
            except Exception:
                if depth == 0:
                    db.rollback()
                    db.info.pop(_AFTER_COMMIT, None)
                raise
            finally:
                db.info[_TX_DEPTH] = depth
            if depth == 0:
                for callback in db.info.pop(_AFTER_COMMIT, []):
                    callback()
            return result
        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
