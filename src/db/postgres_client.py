"""Relational database connection and session utilities."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker

from src.db.postgres_bootstrap import Base
from src.models import *  # Needed for Base metadata

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and session factory for one database URL.

    Built once at application startup and disposed on shutdown; request
    handlers receive it through dependency injection.
    """

    def __init__(self, url: str, pool_size: int = 10, max_overflow: int = 20, echo: bool = False):
        self.url = url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.echo = echo
        self._engine = None
        self._session_factory = None

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def engine(self):
        if not self._engine:
            if self.is_sqlite:
                self._engine = create_engine(
                    self.url, echo=self.echo, connect_args={"check_same_thread": False}
                )
                event.listen(self._engine, "connect", _enable_sqlite_foreign_keys)
            else:
                self._engine = create_engine(
                    self.url,
                    echo=self.echo,
                    pool_pre_ping=True,
                    pool_size=self.pool_size,
                    max_overflow=self.max_overflow,
                )
        return self._engine

    @property
    def session_factory(self):
        if not self._session_factory:
            self._session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        return self._session_factory

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on error."""
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            raise e
        finally:
            session.close()

    def ping(self) -> bool:
        """Run a trivial query to check connectivity."""
        with self.engine.connect() as conn:
            return conn.execute(text("SELECT 1")).scalar() == 1

    def create_tables(self):
        """Create all tables in the database."""
        logger.log(logging.INFO, "Creating tables...")

        try:
            Base.metadata.create_all(self.engine)
            logger.log(logging.INFO, "Tables created successfully.")
        except Exception as e:
            logger.log(logging.ERROR, f"Error creating tables: {e}")
            raise e

    def dispose(self):
        """Close every pooled connection."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database connections closed")
