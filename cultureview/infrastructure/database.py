"""Database Session Manager — blocking and async engines with pooling and health checks.

Invariants:
    - One blocking and one async engine per manager, pointing at the same database
    - Every ad-hoc session auto-rolls-back on exception (no partial commits leak)
    - All SQLAlchemy exceptions from ad-hoc sessions mapped to PersistenceFault

Design Decisions:
    - No module-level singleton: the manager is built once at startup and injected into
      scope managers and gateways
    - expire_on_commit=False: views re-read models after commit without lazy loads
    - SQLite URLs skip pool sizing (SQLite pools reject pool_size/max_overflow)
"""

import logging
from contextlib import asynccontextmanager, contextmanager
from typing import AsyncGenerator, Generator

from sqlalchemy import create_engine, text
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.orm import Session, sessionmaker

from cultureview.config import Settings
from cultureview.core.errors import PersistenceFault

logger = logging.getLogger(__name__)


def map_sqlalchemy_error(e: SQLAlchemyError, operation: str) -> PersistenceFault:
    """Translate a SQLAlchemy exception into the domain fault."""
    if isinstance(e, IntegrityError):
        return PersistenceFault("Integrity constraint violated", operation)
    if isinstance(e, OperationalError):
        return PersistenceFault("Connection or operational error", operation)
    if isinstance(e, DBAPIError):
        return PersistenceFault("Database driver error", operation)
    return PersistenceFault("Database operation failed", operation)


def _engine_kwargs(url: str, pool_size: int, max_overflow: int, echo: bool) -> dict:
    kwargs: dict = {"echo": echo}
    if not url.startswith("sqlite"):
        kwargs.update(
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
    return kwargs


class DatabaseSessionManager:
    """Owns the engines and session factories for one database."""

    def __init__(
        self,
        database_url: str,
        sync_database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        self.async_engine = create_async_engine(
            database_url,
            **_engine_kwargs(database_url, pool_size, max_overflow, echo),
        )
        self.engine = create_engine(
            sync_database_url,
            **_engine_kwargs(sync_database_url, pool_size, max_overflow, echo),
        )
        self.async_session_factory = async_sessionmaker(
            self.async_engine, class_=AsyncSession, expire_on_commit=False,
        )
        self.session_factory = sessionmaker(
            self.engine, class_=Session, expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseSessionManager":
        return cls(
            settings.database_url,
            settings.sync_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            echo=settings.database_echo,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide async session with auto-rollback on exception."""
        session = self.async_session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise map_sqlalchemy_error(e, "session") from e
        finally:
            await session.close()

    @contextmanager
    def sync_session(self) -> Generator[Session, None, None]:
        """Provide blocking session with auto-rollback on exception."""
        session = self.session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise map_sqlalchemy_error(e, "session") from e
        finally:
            session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.async_engine.dispose()
        self.engine.dispose()
