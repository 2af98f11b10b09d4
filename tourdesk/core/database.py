"""Database configuration for the tourdesk service."""

import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from tourdesk.core.config import settings

logger = logging.getLogger(__name__)


def _build_engine(database_url: str):
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(
            database_url,
            pool_size=10,            # Máx. conexiones en el pool
            max_overflow=20,         # Conexiones extra si el pool está lleno
            pool_timeout=30,         # Espera máx. para obtener una conexión
            pool_recycle=1800,       # Recicla conexiones cada 30 min
            pool_pre_ping=True,      # Testea conexión antes de usarla
        )

    options = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        # Una sola conexión compartida para que la base en memoria sobreviva
        options["poolclass"] = StaticPool
    sqlite_engine = create_engine(database_url, **options)

    @event.listens_for(sqlite_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):  # pragma: no cover
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


engine = _build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def verify_database_connection() -> None:
    """Ensure the service can connect to the configured database."""

    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.exception("Database connection validation failed")
        raise RuntimeError("Failed to connect to the tourdesk database") from exc


__all__ = ["Base", "SessionLocal", "engine", "verify_database_connection"]
