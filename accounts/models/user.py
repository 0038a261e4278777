"""User account ORM model."""

from __future__ import annotations

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from accounts.db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """Registered community member edited through the account forms."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)
    nickname: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    url: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    info: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    public_email: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    gr_email: Mapped[str] = mapped_column(String(80), nullable=False, default="")
    lang: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    lang_adds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    followers: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    following: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_forbid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
