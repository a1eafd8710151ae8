"""Application configuration."""

from typing import Literal
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # OpenRouter Settings (structured report generation)
    openrouter_api_key: str | None = Field(default=None, description="OpenRouter API key")
    openrouter_base_url: str = Field(
        default="https://openrouter.ai/api/v1/chat/completions",
        description="Chat completion endpoint"
    )
    openrouter_model: str = Field(
        default="qwen/qwen3-235b-a22b:free",
        description="Model used for report generation"
    )
    openrouter_http_referer: str | None = Field(default=None, description="Optional HTTP-Referer header")
    openrouter_x_title: str | None = Field(default=None, description="Optional X-Title header")
    openrouter_provider_sort: Literal["price", "quality", "speed"] = Field(
        default="price",
        description="Provider routing preference"
    )

    # Report Generation Parameters
    report_temperature: float = Field(default=0.1, description="Sampling temperature (0-2)")
    report_max_tokens: int = Field(default=16000, description="Maximum tokens per report")
    report_timeout_seconds: float = Field(
        default=180.0,
        description="Timeout for a single generator call in seconds"
    )
    report_max_attempts: int = Field(
        default=3,
        description="Generator call attempts before giving up"
    )
    report_backoff_seconds: float = Field(
        default=1.0,
        description="Linear backoff unit: attempt N waits N * unit before retrying"
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./callreport.db",
        description="Database connection URL"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Comma-separated list of allowed CORS origins"
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # Development Settings
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Log level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper

    @field_validator("report_temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        """Validate temperature is between 0 and 2."""
        if not 0 <= v <= 2:
            raise ValueError("report_temperature must be between 0 and 2")
        return v

    @field_validator("report_max_tokens", "report_max_attempts")
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        """Validate integer is positive."""
        if v <= 0:
            raise ValueError(f"Value must be positive, got {v}")
        return v

    @field_validator("report_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("report_timeout_seconds must be positive")
        return v

    @field_validator("report_backoff_seconds")
    @classmethod
    def validate_backoff(cls, v: float) -> float:
        """Validate backoff is not negative."""
        if v < 0:
            raise ValueError("report_backoff_seconds must not be negative")
        return v


# Global settings instance
settings = Settings()
