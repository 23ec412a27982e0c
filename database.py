"""
Engine, sessions and schema setup for DoseTrack
"""

import logging
from contextlib import contextmanager
from typing import Dict, Generator

from sqlalchemy import create_engine, event, inspect, select, func, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from config import settings


logger = logging.getLogger(__name__)


def _enforce_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ships with FK enforcement off; category SET NULL and log cascades need it
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, echo: bool = False) -> Engine:
    """
    Engine for the configured URL

    SQLite shares one connection across threads so an in-memory database
    survives between requests. Other backends get a checked pool.
    """
    if url.startswith("sqlite"):
        sqlite_engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )
        event.listen(sqlite_engine, "connect", _enforce_sqlite_foreign_keys)
        return sqlite_engine

    return create_engine(url, echo=echo, pool_size=10, max_overflow=20, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; routers commit through the services"""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Session for service calls made without a request session.
    Commits on success, rolls back and re-raises on error.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """Create any missing tables for the registered models"""
    import models  # noqa: F401  (registers the tables on Base)

    Base.metadata.create_all(bind=engine)
    logger.info(f"Schema ready on {engine.url.get_backend_name()}")


class DatabaseHealthCheck:
    """Connectivity and row-count probes used by /health"""

    @staticmethod
    def is_connected() -> bool:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.exception("Database connectivity check failed")
            return False

    @staticmethod
    def get_table_counts() -> Dict[str, int]:
        """Row counts for every model table present in the database"""
        present = set(inspect(engine).get_table_names())

        counts = {}
        with get_db_context() as session:
            for table in Base.metadata.sorted_tables:
                if table.name in present:
                    counts[table.name] = session.execute(
                        select(func.count()).select_from(table)
                    ).scalar()

        return counts


__all__ = [
    "engine",
    "build_engine",
    "SessionLocal",
    "Base",
    "get_db",
    "get_db_context",
    "init_db",
    "DatabaseHealthCheck",
]
