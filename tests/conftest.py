"""Root conftest — shared database fixtures for blocking and async pipelines.

Invariants:
    - Every test gets a fresh in-memory SQLite database (one per engine)
    - SAVEPOINTs behave as on PostgreSQL: the driver's own transaction handling is
      disabled and SQLAlchemy emits BEGIN itself
    - Foreign keys enforced, so tag rows need their parent article

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for pipeline tests
      (PostgreSQL-specific features not exercised here)
    - StaticPool: every session of a test sees the same in-memory database
"""

import os

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from cultureview.core.domain_types import SupportedCulture
from cultureview.db.base import Base
from cultureview.infrastructure.repository import (
    AsyncSqlAlchemyRepository, SqlAlchemyRepository,
)
from cultureview.infrastructure.unit_of_work import (
    AsyncTransactionScopeManager, TransactionScopeManager,
)
from cultureview.models import Article, ArticleTag

# Ensure tests never point at a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")


def _configure_sqlite(engine) -> None:
    """pysqlite/aiosqlite SAVEPOINT recipe plus foreign key enforcement."""

    @event.listens_for(engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")


# ─── Blocking ────────────────────────────────────────────────────

@pytest.fixture
def sync_engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    _configure_sqlite(engine)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(sync_engine):
    return sessionmaker(sync_engine, class_=Session, expire_on_commit=False)


@pytest.fixture
def scopes(session_factory):
    return TransactionScopeManager(session_factory)


@pytest.fixture
def article_gateway():
    return SqlAlchemyRepository(Article)


@pytest.fixture
def tag_gateway():
    return SqlAlchemyRepository(ArticleTag)


# ─── Async ───────────────────────────────────────────────────────

@pytest.fixture
async def async_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", poolclass=StaticPool,
    )
    _configure_sqlite(engine.sync_engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def async_session_factory(async_engine):
    return async_sessionmaker(
        async_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def async_scopes(async_session_factory):
    return AsyncTransactionScopeManager(async_session_factory)


@pytest.fixture
def async_article_gateway():
    return AsyncSqlAlchemyRepository(Article)


@pytest.fixture
def async_tag_gateway():
    return AsyncSqlAlchemyRepository(ArticleTag)


# ─── Cultures ────────────────────────────────────────────────────

@pytest.fixture
def cultures():
    """en-us (default), vi-vn, fr-fr and an unsupported de-de."""
    return [
        SupportedCulture("en-us", is_default=True),
        SupportedCulture("vi-vn"),
        SupportedCulture("fr-fr"),
        SupportedCulture("de-de", is_supported=False),
    ]
