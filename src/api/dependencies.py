"""FastAPI dependencies for authentication and database."""

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db
from src.exceptions import AuthenticationError, AuthorizationError
from src.repositories.users import SqlAlchemyUserRepository, UserRepository
from src.services.accounts import AccountService
from src.services.auth import InvalidTokenError, TokenExpiredError, decode_access_token

logger = logging.getLogger(__name__)

# Missing credentials are reported through the envelope, not FastAPI's default 403
security = HTTPBearer(auto_error=False)


def get_user_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRepository:
    """Get the user repository bound to this request's session."""
    return SqlAlchemyUserRepository(db)


def get_account_service(
    repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> AccountService:
    """Get account service with dependencies."""
    return AccountService(repository)


def get_current_subject(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> int:
    """Get the user id asserted by the bearer token.

    The subject is taken from the token alone; it is not looked up in the
    repository.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access denied: no token provided")

    try:
        subject_id = decode_access_token(credentials.credentials)
    except TokenExpiredError:
        logger.info("Rejected expired token")
        raise AuthorizationError("Invalid or expired token") from None
    except InvalidTokenError as e:
        logger.info(f"Rejected invalid token: {e}")
        raise AuthorizationError("Invalid or expired token") from None

    request.state.subject_id = subject_id
    return subject_id
