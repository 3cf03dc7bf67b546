"""
SQL database engine and session management.

Uses SQLAlchemy 2.0 async patterns. The engine is owned by the
SqlEventStore created at startup rather than by this module.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Tuple

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def create_engine_and_sessionmaker(
    url: str,
    echo: bool = False,
) -> Tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Create an async engine and its session factory."""
    kwargs = {"echo": echo, "pool_pre_ping": True}
    if not url.startswith("sqlite"):
        kwargs.update(pool_size=5, max_overflow=10)

    engine = create_async_engine(url, **kwargs)
    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    return engine, session_maker


async def init_db(engine: AsyncEngine) -> None:
    """Initialize the database (create tables)."""
    # Registers the event tables on Base.metadata
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def session_scope(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Get database session as async context manager."""
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
