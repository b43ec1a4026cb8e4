"""
Blog Backend — Database Session Management
============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine with a bounded connection pool and provides a
       session dependency that commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per request.

Connection Pooling:
    pool_size + max_overflow caps the number of simultaneously checked-out
    connections. When every connection is in use, a new request waits up to
    pool_timeout seconds for one to be released.

    SQLite URLs (used by the test suite) get the dialect's default pool, which
    does not accept the sizing arguments.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql.functions import FunctionElement

from app.config import settings


def engine_options(url: str) -> Dict[str, Any]:
    """Keyword arguments for create_async_engine appropriate to the URL's backend."""
    options: Dict[str, Any] = {
        # SQL echo is only useful while developing
        "echo": settings.log_level == "DEBUG",
    }
    if make_url(url).get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine: AsyncEngine = create_async_engine(
    settings.sqlalchemy_url,
    **engine_options(settings.sqlalchemy_url),
)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: services commit mid-request and keep using the
# primary keys they already read
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models; owns the shared metadata."""
    pass


# ── Dialect Helpers ───────────────────────────────────────────────────────
class json_array_agg(FunctionElement):
    """
    Aggregate a column into a JSON array, rendered per dialect.

    PostgreSQL: json_agg(x)   MySQL: JSON_ARRAYAGG(x)   SQLite: json_group_array(x)

    No result type is attached, so the driver's raw value (usually a JSON
    string, sometimes NULL or a decoded list) reaches the caller untouched.
    Callers must normalize it.
    """

    name = "json_array_agg"
    inherit_cache = True


@compiles(json_array_agg)
def _compile_json_array_agg(element, compiler, **kw):
    return "JSON_ARRAYAGG(%s)" % compiler.process(element.clauses, **kw)


@compiles(json_array_agg, "postgresql")
def _compile_json_array_agg_postgresql(element, compiler, **kw):
    return "json_agg(%s)" % compiler.process(element.clauses, **kw)


@compiles(json_array_agg, "sqlite")
def _compile_json_array_agg_sqlite(element, compiler, **kw):
    return "json_group_array(%s)" % compiler.process(element.clauses, **kw)


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits whatever the handler left pending
        4. On error: rolls back the pending work and re-raises
        5. Always: closes the session (returns the connection to the pool)

    Services may commit earlier themselves; statements committed that way
    are not undone by the rollback in step 4.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def ping() -> None:
    """Round-trip a trivial query; raises if the database is unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def dispose_engine() -> None:
    """Close all pooled connections. Called from the application lifespan."""
    await engine.dispose()
