"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via FastAPI.

The engine is built by create_app() from the Settings it is given and
stored on app.state, so tests can point an app at an in-memory SQLite
database without touching globals.
"""

from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from fintrack.config import Settings


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the engine for settings.database_url.

    Postgres gets a connection pool (min 5, max 20). SQLite shares one
    connection so an in-memory database survives across sessions.
    """
    url = make_url(settings.database_url)
    if url.get_backend_name() == "sqlite":
        pool_kwargs = {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    else:
        pool_kwargs = {"pool_size": 5, "max_overflow": 15}

    return create_async_engine(url, echo=settings.debug, **pool_kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Session factory: each request gets its own session.
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with request.app.state.session_factory() as session:
        yield session
