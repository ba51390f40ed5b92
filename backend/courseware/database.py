"""
Courseware Backend — Database Session Management
==================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   A `Database` object owns one engine with connection pooling. The app
       factory builds it from Settings and stores it on `app.state`; the
       session dependency reads it from there for every request.
Who:   Created by `create_app()`; used by route dependencies and the health check.
When:  Engine is created with the app; sessions are created per-request.

Connection Pooling Strategy (non-SQLite URLs):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from courseware.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All record classes share this metadata, which `Database.create_all()`
    uses to bootstrap tables at startup.
    """
    pass


class Database:
    """
    Holds the engine and session factory for one application instance.

    Passing this object around (instead of importing a module-level engine)
    lets each test build an app against its own throwaway database.
    """

    def __init__(self, settings: Settings):
        engine_kwargs = {
            "pool_pre_ping": settings.db_pool_pre_ping,
            # Echo SQL queries in DEBUG mode for development visibility
            "echo": settings.log_level == "DEBUG",
        }
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_recycle=3600,
            )

        self.engine: AsyncEngine = create_async_engine(settings.database_url, **engine_kwargs)

        # expire_on_commit=False: attributes stay readable after commit,
        # so a freshly inserted record can be returned without a reload
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Create any missing tables for the registered record classes."""
        # Imported for its side effect of registering tables on Base.metadata
        from courseware.models import course  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> None:
        """Run a trivial query; raises if the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """
        Gracefully closes all connections in the pool.

        Called during application shutdown (lifespan handler).
        """
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's Database
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/courses")
        async def list_courses(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise  # Re-raise so the global error handler can respond
        finally:
            await session.close()
