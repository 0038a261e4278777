"""Async SQLAlchemy engine and request-scoped session helpers."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from accounts.config import get_settings


@lru_cache
def get_engine() -> AsyncEngine:
    """Build and cache the async SQLAlchemy engine from database settings."""
    database = get_settings().database
    return create_async_engine(
        database.url,
        pool_pre_ping=True,
        pool_size=database.pool_size,
        max_overflow=database.max_overflow,
        echo=database.echo,
    )


@lru_cache
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Build and cache the async session factory.

    Objects stay loaded after commit so a form can keep reading the user
    record it just saved.
    """
    return async_sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session per request and roll back whatever was left uncommitted."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


async def dispose_engine() -> None:
    """Dispose the SQLAlchemy engine and close pooled connections."""
    await get_engine().dispose()
