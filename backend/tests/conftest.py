"""
Blog Backend — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite database file (aiosqlite driver) with
       the schema created from the ORM metadata. The FastAPI app's
       get_db_session dependency is overridden to use that database, and an
       HTTPX AsyncClient talks to the app through ASGITransport.

Fixture Hierarchy (all function-scoped):
    ├── db_engine:        async engine on a temp SQLite file, tables created
    ├── session_factory:  async_sessionmaker bound to db_engine
    ├── db_session:       a session for direct service-level tests
    ├── app:              fresh FastAPI app wired to session_factory
    ├── client:           HTTPX AsyncClient for the app
    └── mock_db_session:  AsyncMock session for failure-path tests
"""

import os
import tempfile
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

# Must happen before any app import: settings and the engine read these
_TMP_DIR = tempfile.mkdtemp(prefix="blog_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/app.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["APP_ENV"] = "test"
os.environ["DEBUG"] = "false"
os.environ["CORS_ORIGINS"] = "http://localhost:5173"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.database import Base, get_db_session
from app.models.article import Article  # noqa: F401
from app.models.category import Category  # noqa: F401


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'blog.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(session_factory):
    """
    A fresh app whose requests use the per-test database.

    The override mirrors app.database.get_db_session: commit on success,
    rollback on error, always close.
    """
    from app.main import create_app

    application = create_app()

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_get_db_session
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def mock_db_session():
    """
    A mock async session for tests that force database failures.

    Usage:
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


async def create_category(client: AsyncClient, name: str) -> dict:
    response = await client.post("/api/categories", json={"name": name})
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def create_article(client: AsyncClient, **fields) -> dict:
    payload = {"title": "Title", "content": "Body"}
    payload.update(fields)
    response = await client.post("/api/articles", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]
