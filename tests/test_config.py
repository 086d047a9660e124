# =============================================================================
# tests/test_config.py - Settings Tests
# =============================================================================

import pytest
from pydantic import ValidationError

from app.config import DEFAULT_SECRET_KEY, Settings


class TestSecretKey:
    """SECRET_KEY signs client-session tokens."""

    def test_default_allowed_in_development(self):
        settings = Settings(_env_file=None, ENVIRONMENT="development", SECRET_KEY=DEFAULT_SECRET_KEY)

        assert settings.SECRET_KEY == DEFAULT_SECRET_KEY

    def test_default_rejected_in_production(self):
        with pytest.raises(ValidationError, match="SECRET_KEY"):
            Settings(_env_file=None, ENVIRONMENT="production", SECRET_KEY=DEFAULT_SECRET_KEY)

    def test_unset_key_rejected_in_production(self, monkeypatch):
        """An empty env value falls back to the default, which production refuses."""
        monkeypatch.setenv("SECRET_KEY", "")
        monkeypatch.setenv("ENVIRONMENT", "production")

        with pytest.raises(ValidationError, match="SECRET_KEY"):
            Settings(_env_file=None)

    def test_private_key_accepted_in_production(self):
        settings = Settings(
            _env_file=None,
            ENVIRONMENT="production",
            SECRET_KEY="a-private-production-signing-key",
        )

        assert settings.is_production is True

    def test_short_key_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, SECRET_KEY="short")
