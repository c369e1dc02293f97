"""User persistence behind a small async repository interface."""

import logging
from collections.abc import Sequence
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.user import User

logger = logging.getLogger(__name__)


class DuplicateEmailError(Exception):
    """A write would store an email that another user already has."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email already stored: {email}")


class UserRepository(Protocol):
    """Storage operations the account service relies on."""

    async def find_all(self) -> Sequence[User]: ...

    async def find_by_id(self, user_id: int) -> User | None: ...

    async def find_by_email(self, email: str) -> User | None: ...

    async def insert(self, user: User) -> User: ...

    async def save(self, user: User) -> User: ...

    async def remove(self, user: User) -> None: ...


class SqlAlchemyUserRepository:
    """Repository over an async SQLAlchemy session.

    Writes commit immediately; the unique index on ``users.email`` is the
    final guard against duplicates and surfaces as ``DuplicateEmailError``.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_all(self) -> Sequence[User]:
        result = await self.db.execute(select(User).order_by(User.id))
        return result.scalars().all()

    async def find_by_id(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def insert(self, user: User) -> User:
        self.db.add(user)
        await self._commit(user.email)
        await self.db.refresh(user)
        return user

    async def save(self, user: User) -> User:
        await self._commit(user.email)
        await self.db.refresh(user)
        return user

    async def remove(self, user: User) -> None:
        await self.db.delete(user)
        await self.db.commit()

    async def _commit(self, email: str) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            # Rollback expires loaded instances, so only the captured email is used below
            await self.db.rollback()
            if not _is_duplicate_email(e):
                raise
            logger.warning(f"Unique constraint rejected email {email!r}")
            raise DuplicateEmailError(email) from e


def _is_duplicate_email(error: IntegrityError) -> bool:
    """Whether the violated constraint is the unique index on ``users.email``."""
    detail = str(error.orig).lower()
    return ("unique" in detail or "duplicate" in detail) and "email" in detail


def _detached_copy(user: User) -> User:
    return User(
        id=user.id,
        name=user.name,
        surname=user.surname,
        email=user.email,
        password_hash=user.password_hash,
    )


class InMemoryUserRepository:
    """Dict-backed repository with the same uniqueness guarantee.

    Stores and hands out copies, so an object mutated by a caller only
    changes the stored record once it is saved.
    """

    def __init__(self, users: Sequence[User] = ()):
        self._users: dict[int, User] = {}
        self._last_id = 0
        for user in users:
            self._store(user)

    async def find_all(self) -> Sequence[User]:
        return [_detached_copy(self._users[user_id]) for user_id in sorted(self._users)]

    async def find_by_id(self, user_id: int) -> User | None:
        user = self._users.get(user_id)
        return _detached_copy(user) if user is not None else None

    async def find_by_email(self, email: str) -> User | None:
        for user in self._users.values():
            if user.email == email:
                return _detached_copy(user)
        return None

    async def insert(self, user: User) -> User:
        return self._store(user)

    async def save(self, user: User) -> User:
        return self._store(user)

    async def remove(self, user: User) -> None:
        self._users.pop(user.id, None)

    def _store(self, user: User) -> User:
        for other in self._users.values():
            if other.email == user.email and other.id != user.id:
                raise DuplicateEmailError(user.email)
        if user.id is None:
            user.id = self._last_id + 1
        self._last_id = max(self._last_id, user.id)
        self._users[user.id] = _detached_copy(user)
        return user
