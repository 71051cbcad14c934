"""
Database utilities: pooled engine construction and SQLAlchemy session management.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator, Mapping

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_engine(config: Mapping) -> Engine:
    """
    Create the process-wide connection pool from application config.

    The caller owns the returned engine and is responsible for disposing it.
    """
    url = make_url(config["DATABASE_URL"])

    connect_args = {}
    if url.get_backend_name() == "sqlite":
        # Pooled sqlite connections are shared across request threads.
        connect_args["check_same_thread"] = False
    elif url.get_backend_name() == "mysql":
        connect_args.setdefault("connect_timeout", 10)

    engine = create_engine(
        url,
        poolclass=QueuePool,
        pool_size=config.get("DB_CONNECTION_LIMIT", 10),
        max_overflow=0,
        pool_pre_ping=True,
        pool_recycle=config.get("DB_POOL_RECYCLE", 3600),
        pool_timeout=config.get("DB_POOL_TIMEOUT", 10),
        future=True,
        echo=False,
        connect_args=connect_args,
    )
    logger.info("[db] pool created host=%s database=%s", url.host, url.database)
    return engine


def init_db(engine: Engine) -> None:
    """
    Import models and create missing tables.
    """
    try:
        from directory import models  # noqa: F401  (side-effect import)
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Error initializing database: {e}", exc_info=True)
        raise


def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


@contextmanager
def db_session(engine: Engine) -> Generator[Session, None, None]:
    """
    Context manager that yields a SQLAlchemy session and guarantees cleanup.
    """
    session = session_factory(engine)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
