"""
Test configuration for the Visa API tests.

The environment is set BEFORE anything from visa_api is imported: settings are
read once at import time and ADMIN_API_KEY is mandatory.

Every test gets its own SQLite file (aiosqlite) created from the ORM metadata.
The app is pointed at it through app.dependency_overrides, so no PostgreSQL,
no Alembic run and no lifespan are involved.

Run from the project root: pytest -v
"""
import os
import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent.parent   # .../package/
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

os.environ.setdefault("ADMIN_API_KEY", "test-admin-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import visa_api.models  # noqa: F401  (registers every table on Base.metadata)
from visa_api.config import settings
from visa_api.database import Base, get_sessionmaker
from visa_api.main import app
from visa_api.store import ReferenceStore, RequirementStore


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def sessions(tmp_path):
    """Session factory bound to a fresh, fully created SQLite database."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'visa.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def reference_store(sessions) -> ReferenceStore:
    return ReferenceStore(sessions)


@pytest.fixture
def requirement_store(sessions) -> RequirementStore:
    return RequirementStore(sessions)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def client(sessions):
    """Async httpx client using ASGI transport — no live server needed."""
    app.dependency_overrides[get_sessionmaker] = lambda: sessions
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"x-api-key": settings.admin_api_key}
