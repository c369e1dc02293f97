"""Tests for settings validation."""

import pytest
from pydantic import ValidationError

from src.config import Settings


class TestProductionGuard:
    def test_default_secret_rejected_in_production(self):
        with pytest.raises(ValidationError, match="JWT_SECRET"):
            Settings(environment="production", jwt_secret="change-me-in-production")

    def test_localhost_database_rejected_in_production(self):
        with pytest.raises(ValidationError, match="localhost"):
            Settings(
                environment="production",
                jwt_secret="a-real-secret",
                database_url="postgresql+asyncpg://app@localhost/users",
            )

    def test_production_with_real_settings(self):
        settings = Settings(
            environment="production",
            jwt_secret="a-real-secret",
            database_url="postgresql+asyncpg://app@db.internal/users",
        )
        assert settings.is_production
        assert not settings.is_development
        assert not settings.is_sqlite
