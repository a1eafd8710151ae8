"""Unit tests for configuration validation."""

import pytest
from pydantic import ValidationError
from backend.app.core.config import Settings


class TestSettingsValidation:
    """Test cases for Settings validation."""

    def test_default_settings(self):
        """Test that default settings are valid."""
        settings = Settings()

        assert settings.log_level == "INFO"
        assert settings.report_max_attempts == 3
        assert settings.report_backoff_seconds == 1.0
        assert settings.report_timeout_seconds > 0
        assert settings.openrouter_provider_sort == "price"

    def test_log_level_validation_valid(self):
        """Test log level accepts valid values."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

        for level in valid_levels:
            settings = Settings(log_level=level)
            assert settings.log_level == level.upper()

    def test_log_level_validation_case_insensitive(self):
        """Test log level is case-insensitive."""
        settings = Settings(log_level="info")
        assert settings.log_level == "INFO"

        settings = Settings(log_level="DeBuG")
        assert settings.log_level == "DEBUG"

    def test_log_level_validation_invalid(self):
        """Test log level rejects invalid values."""
        with pytest.raises(ValidationError, match="log_level must be one of"):
            Settings(log_level="INVALID")

    def test_temperature_range(self):
        """Test report_temperature must be between 0 and 2."""
        with pytest.raises(ValidationError, match="report_temperature must be between 0 and 2"):
            Settings(report_temperature=-0.1)

        with pytest.raises(ValidationError, match="report_temperature must be between 0 and 2"):
            Settings(report_temperature=2.5)

        settings = Settings(report_temperature=0.7)
        assert settings.report_temperature == 0.7

    def test_max_attempts_positive(self):
        """Test report_max_attempts must be positive."""
        with pytest.raises(ValidationError, match="Value must be positive"):
            Settings(report_max_attempts=0)

        settings = Settings(report_max_attempts=5)
        assert settings.report_max_attempts == 5

    def test_max_tokens_positive(self):
        """Test report_max_tokens must be positive."""
        with pytest.raises(ValidationError, match="Value must be positive"):
            Settings(report_max_tokens=-1)

    def test_timeout_positive(self):
        """Test report_timeout_seconds must be positive."""
        with pytest.raises(ValidationError, match="report_timeout_seconds must be positive"):
            Settings(report_timeout_seconds=0)

    def test_backoff_not_negative(self):
        """Test report_backoff_seconds may be zero but not negative."""
        with pytest.raises(ValidationError, match="report_backoff_seconds must not be negative"):
            Settings(report_backoff_seconds=-1)

        settings = Settings(report_backoff_seconds=0)
        assert settings.report_backoff_seconds == 0

    def test_provider_sort_choices(self):
        """Test provider routing preference is restricted."""
        settings = Settings(openrouter_provider_sort="speed")
        assert settings.openrouter_provider_sort == "speed"

        with pytest.raises(ValidationError):
            Settings(openrouter_provider_sort="cheapest")

    def test_cors_origins_list_property(self):
        """Test CORS origins list property parses correctly."""
        settings = Settings(cors_origins="http://localhost:3000,http://localhost:5173")

        origins = settings.cors_origins_list
        assert len(origins) == 2
        assert "http://localhost:3000" in origins
        assert "http://localhost:5173" in origins

    def test_cors_origins_list_with_spaces(self):
        """Test CORS origins list handles spaces correctly."""
        settings = Settings(cors_origins="http://localhost:3000 , http://localhost:5173 ")

        origins = settings.cors_origins_list
        assert len(origins) == 2
        # Verify no trailing spaces
        assert all(not origin.startswith(" ") and not origin.endswith(" ") for origin in origins)
