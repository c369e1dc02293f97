"""Account service: registration, login and user CRUD."""

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import ParamSpec, TypeVar

from src.exceptions import (
    AuthenticationError,
    ConflictError,
    InternalError,
    NotFoundError,
    ServiceError,
)
from src.models.user import User
from src.repositories.users import DuplicateEmailError, UserRepository
from src.schemas.user import UserLogin, UserRegister, UserUpdate
from src.services.auth import (
    create_access_token,
    dummy_verify,
    get_password_hash,
    verify_password,
)
from src.services.validation import (
    MAX_USER_ID,
    ensure_update_not_empty,
    parse_user_id,
    validate_email,
    validate_login_fields,
    validate_required_fields,
    validate_update_payload,
)

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

INVALID_CREDENTIALS = "Invalid credentials"


def fails_with(message: str) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Turn unexpected exceptions into an ``InternalError`` with a generic message."""

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except ServiceError:
                raise
            except Exception as e:
                logger.exception(f"{func.__name__} failed unexpectedly")
                raise InternalError(message) from e

        return wrapper

    return decorator


class AccountService:
    """Service for account and user-directory operations."""

    def __init__(self, repository: UserRepository):
        self.repository = repository

    @fails_with("Error registering user")
    async def register(self, payload: UserRegister) -> User:
        """Register a new account from public sign-up."""
        user = await self._create(payload)
        logger.info(f"Registered user {user.id}")
        return user

    @fails_with("Error logging in")
    async def login(self, payload: UserLogin) -> str:
        """Check credentials and return a bearer token.

        Unknown email and wrong password fail with the same error.
        """
        validate_login_fields(payload.email, payload.password)

        user = await self.repository.find_by_email(payload.email)
        if user is None:
            await asyncio.to_thread(dummy_verify)
            logger.warning("Login failed: unknown email")
            raise AuthenticationError(INVALID_CREDENTIALS)

        matches = await asyncio.to_thread(verify_password, payload.password, user.password_hash)
        if not matches:
            logger.warning(f"Login failed: wrong password for user {user.id}")
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info(f"User {user.id} logged in")
        return create_access_token(user.id)

    @fails_with("Error fetching users")
    async def list_users(self) -> Sequence[User]:
        return await self.repository.find_all()

    @fails_with("Internal server error")
    async def get_user(self, raw_id: str | int) -> User:
        return await self._get_existing(parse_user_id(raw_id))

    @fails_with("Error creating user")
    async def create_user(self, payload: UserRegister, created_by: int | None = None) -> User:
        """Create an account on behalf of an authenticated caller."""
        user = await self._create(payload)
        logger.info(f"User {user.id} created by {created_by}")
        return user

    @fails_with("Internal server error")
    async def update_user(self, raw_id: str | int, payload: UserUpdate) -> User:
        """Apply a partial update, leaving fields that were not sent untouched."""
        user_id = parse_user_id(raw_id)
        changes = payload.changes()
        ensure_update_not_empty(changes)

        user = await self._get_existing(user_id)
        changes = validate_update_payload(changes)

        new_email = changes.get("email")
        if new_email is not None and new_email != user.email:
            validate_email(new_email)
            await self._ensure_email_available(new_email)

        if "password" in changes:
            password = changes.pop("password")
            changes["password_hash"] = await asyncio.to_thread(get_password_hash, password)

        for attribute, value in changes.items():
            setattr(user, attribute, value)

        user = await self._write(self.repository.save, user)
        logger.info(f"Updated user {user.id}: {sorted(changes)}")
        return user

    @fails_with("Internal server error")
    async def delete_user(self, raw_id: str | int) -> None:
        user_id = parse_user_id(raw_id)
        user = await self._get_existing(user_id)
        await self.repository.remove(user)
        logger.info(f"Deleted user {user_id}")

    async def _create(self, payload: UserRegister) -> User:
        validate_required_fields(payload.name, payload.email, payload.password)
        email = validate_email(payload.email)
        await self._ensure_email_available(email)

        password_hash = await asyncio.to_thread(get_password_hash, payload.password)
        surname = payload.surname.strip() if payload.surname and payload.surname.strip() else None
        user = User(
            name=payload.name.strip(),
            surname=surname,
            email=email,
            password_hash=password_hash,
        )
        return await self._write(self.repository.insert, user)

    async def _get_existing(self, user_id: int) -> User:
        if user_id > MAX_USER_ID:
            raise NotFoundError("User not found")
        user = await self.repository.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def _ensure_email_available(self, email: str) -> None:
        if await self.repository.find_by_email(email) is not None:
            raise ConflictError("Email already in use")

    async def _write(self, operation: Callable[[User], Awaitable[User]], user: User) -> User:
        """Persist, treating a unique-constraint rejection as a conflict."""
        try:
            return await operation(user)
        except DuplicateEmailError as e:
            raise ConflictError("Email already in use") from e
