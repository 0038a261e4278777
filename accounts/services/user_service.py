"""User lookup, uniqueness checks and password verification services."""

from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache

import structlog
from passlib.context import CryptContext
from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.models.user import User

logger = structlog.get_logger(__name__)

UNIQUE_FIELDS = {"username": User.username, "email": User.email}


class UserServiceError(Exception):
    """Raised when user management operations fail validation or authorization."""

    def __init__(self, detail: str, code: str, status_code: int) -> None:
        super().__init__(detail)
        self.detail = detail
        self.code = code
        self.status_code = status_code


class UserService:
    """Service backing the account forms' uniqueness and credential checks."""

    def __init__(self) -> None:
        self._password_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    async def can_register(
        self,
        db_session: AsyncSession,
        username: str,
        email: str,
    ) -> tuple[bool, bool]:
        """Return whether the username and the email are each still free."""
        statement = select(User.username, User.email).where(
            or_(User.username == username, User.email == email)
        )
        result = await db_session.execute(statement)
        username_free = True
        email_free = True
        for taken_username, taken_email in result.all():
            if taken_username == username:
                username_free = False
            if taken_email == email:
                email_free = False
        return username_free, email_free

    async def has_user(self, db_session: AsyncSession, username_or_email: str) -> User | None:
        """Fetch a user by email when the value holds ``@``, otherwise by username."""
        if "@" in username_or_email:
            condition = User.email == username_or_email
        else:
            condition = User.username == username_or_email
        result = await db_session.execute(select(User).where(condition))
        return result.scalar_one_or_none()

    async def check_is_exist(
        self,
        db_session: AsyncSession,
        field: str,
        value: str,
        exclude_id: int = 0,
    ) -> bool:
        """Return True when another user already holds ``value`` in ``field``."""
        column = UNIQUE_FIELDS.get(field)
        if column is None:
            raise UserServiceError("Unsupported lookup field.", "invalid_field", 400)

        statement = select(func.count()).select_from(User).where(column == value)
        if exclude_id > 0:
            statement = statement.where(User.id != exclude_id)
        result = await db_session.execute(statement)
        return int(result.scalar_one()) > 0

    async def authenticate_user(
        self,
        db_session: AsyncSession,
        username_or_email: str,
        password: str,
    ) -> User | None:
        """Authenticate login form credentials."""
        user = await self.has_user(db_session=db_session, username_or_email=username_or_email)
        if user is None or not user.password_hash:
            self._password_context.dummy_verify()
            return None
        if not self.verify_password(password=password, password_hash=user.password_hash):
            return None
        if not user.is_active or user.is_forbid:
            logger.info("login_rejected", user_id=user.id, active=user.is_active)
            return None
        return user

    async def update_user(
        self,
        db_session: AsyncSession,
        user: User,
        fields: Sequence[str],
    ) -> None:
        """Persist only ``fields`` of ``user`` and commit."""
        if not fields:
            return
        values = {name: getattr(user, name) for name in dict.fromkeys(fields)}
        statement = update(User).where(User.id == user.id).values(**values)
        await db_session.execute(statement)
        await db_session.commit()
        logger.info("user_updated", user_id=user.id, fields=list(values))

    def hash_password(self, password: str) -> str:
        """Generate a bcrypt hash for the provided password."""
        return str(self._password_context.hash(password))

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a plaintext password against the stored bcrypt hash."""
        if not password_hash:
            return False
        return bool(self._password_context.verify(password, password_hash))


@lru_cache
def get_user_service() -> UserService:
    """Return the process-wide user service."""
    return UserService()
