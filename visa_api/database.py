"""
database.py — SQLAlchemy 2.0 async engine and session factory.

This module owns ALL database connection infrastructure.
Nothing else in the codebase creates engines or sessions directly.

Stores receive the session factory as a constructor argument and open one
session per logical operation, so concurrent reads each hold their own pooled
connection:

    from visa_api.database import get_sessionmaker
    async def route(sessions = Depends(get_sessionmaker)): ...
"""
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from visa_api.config import settings


# ---------------------------------------------------------------------------
# Declarative base — ALL ORM models inherit from this
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base.
    All ORM models in visa_api/models/ inherit from Base.
    Defined here (not in models/) to prevent circular imports in alembic/env.py.
    """
    pass


def engine_options(database_url: str) -> dict[str, Any]:
    """
    Pool options for create_async_engine().

    Server databases get a bounded pool with no overflow: callers beyond
    db_pool_size queue for a connection instead of opening new ones.
    SQLite picks its own pool class and rejects sizing arguments.
    """
    options: dict[str, Any] = {"echo": settings.debug}
    if database_url.startswith("sqlite"):
        return options
    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=0,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=True,   # Detect and discard stale connections before each use
    )
    return options


# ---------------------------------------------------------------------------
# Async engine — one per application lifetime
# ---------------------------------------------------------------------------
async_engine = create_async_engine(
    settings.database_url,
    **engine_options(settings.database_url),
)

# ---------------------------------------------------------------------------
# Session factory — produces AsyncSession instances
# ---------------------------------------------------------------------------
AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,   # Keep objects usable after commit without re-querying
)


# ---------------------------------------------------------------------------
# FastAPI dependency — hands out the session factory
# ---------------------------------------------------------------------------
def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """
    FastAPI dependency returning the application session factory.

    Tests override this with a factory bound to their own engine:
        app.dependency_overrides[get_sessionmaker] = lambda: test_sessions
    """
    return AsyncSessionLocal
