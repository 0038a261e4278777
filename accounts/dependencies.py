"""Shared FastAPI dependency helpers."""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.db.session import get_db_session
from accounts.i18n import Locale, get_locale, negotiate_language


async def get_database_session() -> AsyncGenerator[AsyncSession, None]:
    """Expose the request-scoped async database session dependency."""
    async for session in get_db_session():
        yield session


def get_request_locale(request: Request) -> Locale:
    """Resolve the translator for the request's Accept-Language header."""
    return get_locale(negotiate_language(request.headers.get("accept-language")))
