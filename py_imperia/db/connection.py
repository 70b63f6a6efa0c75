"""Database connection utilities."""

from contextlib import contextmanager
from typing import Iterator, Optional

import structlog
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config.config import settings
from .models import Base

logger = structlog.get_logger()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and session factory for stored world maps."""

    def __init__(self):
        self.engine: Optional[Engine] = None
        self.SessionLocal = None

    def initialize(self, database_url: Optional[str] = None) -> None:
        """
        Connect and create tables.

        Args:
            database_url: SQLAlchemy URL; defaults to settings.database_url.
                "sqlite://" gives a private in-memory database.
        """
        url = database_url or settings.database_url
        logger.info("Initializing database connection", url=url)

        if self.engine is not None:
            self.dispose()

        if url.startswith("sqlite"):
            # One shared connection so an in-memory database survives across sessions.
            self.engine = create_engine(
                url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                echo=settings.debug,
            )
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self.engine = create_engine(url, pool_pre_ping=True, echo=settings.debug)

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.create_tables()

        logger.info("Database connection initialized", dialect=self.engine.dialect.name)

    def create_tables(self) -> None:
        try:
            Base.metadata.create_all(bind=self.engine)
            logger.info("Database tables created", tables=sorted(Base.metadata.tables))
        except Exception as e:
            logger.error("Failed to create tables", error=str(e))
            raise

    def dispose(self) -> None:
        """Close pooled connections and forget the session factory."""
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.SessionLocal = None

    @property
    def is_initialized(self) -> bool:
        return self.SessionLocal is not None

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """Session that commits on success and rolls back on error."""
        if not self.SessionLocal:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


# Global database instance
db = Database()
