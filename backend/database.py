"""
Data store wiring.

The engine and session factory are owned by a Database object, which lives in
the AppContext built by the application factory. Nothing here is created at
import time; the FastAPI lifespan calls startup() and shutdown().
"""

import logging
from dataclasses import dataclass
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from config import Settings
from errors import StoreUnavailableError

logger = logging.getLogger(__name__)

Base = declarative_base()


def _create_engine(url: str, connect_timeout: int, pool_size: int):
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False, "timeout": connect_timeout}}
        # An in-memory database only exists for the lifetime of one connection
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=pool_size,
        pool_timeout=connect_timeout,
        connect_args={"connect_timeout": connect_timeout},
    )


class Database:
    """Connection pool plus session factory for one data store."""

    def __init__(self, url: str, connect_timeout: int = 5, pool_size: int = 5):
        self.url = url
        self.engine = _create_engine(url, connect_timeout, pool_size)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def startup(self, create_tables: bool = False) -> None:
        """
        Verify the store is reachable and optionally create missing tables.

        Raises:
            StoreUnavailableError: if no connection can be established
        """
        logger.debug(f"Connecting to data store ({self.engine.url.get_backend_name()})")
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            if create_tables:
                # Models register themselves on Base when imported
                import models  # noqa: F401

                Base.metadata.create_all(bind=self.engine)
                logger.info("Database tables verified")
        except OperationalError as e:
            logger.error(f"Data store unreachable: {e}")
            raise StoreUnavailableError("Data store unavailable") from e
        logger.info("Data store connection established")

    def shutdown(self) -> None:
        self.engine.dispose()
        logger.info("Data store connection pool disposed")

    def session(self) -> Session:
        return self.SessionLocal()


@dataclass
class AppContext:
    """Process-wide state shared by all requests."""

    settings: Settings
    database: Database

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        database = Database(
            settings.database_url,
            connect_timeout=settings.db_connect_timeout,
            pool_size=settings.db_pool_size,
        )
        return cls(settings=settings, database=database)

    def startup(self) -> None:
        self.database.startup(create_tables=self.settings.db_create_tables)

    def shutdown(self) -> None:
        self.database.shutdown()


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_settings(request: Request) -> Settings:
    return get_context(request).settings


def get_db(request: Request) -> Generator[Session, None, None]:
    """Request-scoped session; closed (and rolled back if uncommitted) on exit."""
    db = get_context(request).database.session()
    try:
        yield db
    finally:
        db.close()
