"""Database engine, session and declarative base exports."""

from accounts.db.base import Base
from accounts.db.session import dispose_engine, get_db_session, get_engine, get_session_factory

__all__ = ["Base", "dispose_engine", "get_db_session", "get_engine", "get_session_factory"]
