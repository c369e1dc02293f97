"""Password hashing and JWT session tokens."""

from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from src.config import get_settings

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


class InvalidTokenError(Exception):
    """Token is malformed, forged, or carries no usable subject."""


class TokenExpiredError(InvalidTokenError):
    """Token signature is valid but its expiry has passed."""


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    A hash passlib cannot identify counts as a mismatch.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str) -> str:
    """Hash a password. Every call embeds a fresh salt."""
    return pwd_context.hash(password)


def dummy_verify() -> None:
    """Spend the time of a real verification without a stored hash."""
    pwd_context.dummy_verify()


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token asserting ``user_id``."""
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_expiration_minutes))
    to_encode = {
        "sub": str(user_id),
        "iat": now,
        "exp": expire,
    }
    encoded_jwt = jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return encoded_jwt


def decode_access_token(token: str) -> int:
    """Decode and validate a JWT token, returning the subject id.

    Raises:
        TokenExpiredError: the token expired.
        InvalidTokenError: anything else is wrong with it.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as e:
        raise TokenExpiredError("Token expired") from e
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e

    subject = payload.get("sub")
    if subject is None:
        raise InvalidTokenError("Token has no subject")
    try:
        return int(subject)
    except (TypeError, ValueError) as e:
        raise InvalidTokenError("Token subject is not a user id") from e
