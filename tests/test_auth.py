"""Tests for password hashing and session tokens."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from src.config import get_settings
from src.services.auth import (
    InvalidTokenError,
    TokenExpiredError,
    create_access_token,
    decode_access_token,
    dummy_verify,
    get_password_hash,
    verify_password,
)

settings = get_settings()


class TestPasswordHashing:
    """Tests for the bcrypt credential hasher."""

    def test_hash_is_not_plaintext(self):
        hashed = get_password_hash("Password")
        assert hashed != "Password"
        assert hashed.startswith("$2")

    def test_same_password_hashes_differently(self):
        """Each hash embeds its own salt."""
        assert get_password_hash("Password") != get_password_hash("Password")

    def test_verify_matches(self):
        hashed = get_password_hash("correct horse")
        assert verify_password("correct horse", hashed) is True

    def test_verify_mismatch(self):
        hashed = get_password_hash("correct horse")
        assert verify_password("battery staple", hashed) is False

    def test_verify_malformed_hash_is_false(self):
        """An unrecognised hash is a mismatch, not an exception."""
        assert verify_password("anything", "not-a-bcrypt-hash") is False

    def test_dummy_verify_runs(self):
        dummy_verify()


class TestAccessTokens:
    """Tests for JWT issuance and verification."""

    def test_round_trip_returns_subject(self):
        token = create_access_token(42)
        assert decode_access_token(token) == 42

    def test_token_expires_after_configured_window(self):
        token = create_access_token(7)
        claims = jwt.get_unverified_claims(token)
        window = claims["exp"] - claims["iat"]
        assert window == settings.jwt_expiration_minutes * 60

    def test_expired_token(self):
        token = create_access_token(1, expires_delta=timedelta(seconds=-1))
        with pytest.raises(TokenExpiredError):
            decode_access_token(token)

    def test_expired_is_an_invalid_token(self):
        """Callers catching InvalidTokenError also catch expiry."""
        assert issubclass(TokenExpiredError, InvalidTokenError)

    def test_wrong_secret(self):
        token = jwt.encode({"sub": "1"}, "someone-else", algorithm=settings.jwt_algorithm)
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_tampered_payload(self):
        token = create_access_token(1)
        header, _, signature = token.split(".")
        forged = jwt.encode({"sub": "2"}, "x", algorithm="HS256").split(".")[1]
        with pytest.raises(InvalidTokenError):
            decode_access_token(".".join([header, forged, signature]))

    def test_garbage(self):
        with pytest.raises(InvalidTokenError):
            decode_access_token("garbage")

    def test_missing_subject(self):
        expire = datetime.now(UTC) + timedelta(minutes=5)
        token = jwt.encode({"exp": expire}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_non_integer_subject(self):
        expire = datetime.now(UTC) + timedelta(minutes=5)
        token = jwt.encode(
            {"sub": "admin", "exp": expire},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)
