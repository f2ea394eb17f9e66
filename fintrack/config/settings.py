"""
Configuration Management for Fintrack

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # Sheet names within the spreadsheet
    users_sheet_name: str = Field(
        default="Users",
        description="Name of the sheet for user accounts"
    )
    transactions_sheet_name: str = Field(
        default="Transactions",
        description="Name of the sheet for transactions"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the backend."
            )
        return v


class GroqSettings(BaseSettings):
    """Completion endpoint (Groq, OpenAI-compatible) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GROQ_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Optional on purpose: a missing key is reported per request,
    # not at startup.
    api_key: Optional[str] = Field(
        default=None,
        description="Groq API key"
    )
    api_url: str = Field(
        default="https://api.groq.com/openai/v1/chat/completions",
        description="Chat completions endpoint"
    )
    model_name: str = Field(
        default="llama-3.1-70b-versatile",
        description="Model to use for insights"
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature"
    )
    max_tokens: int = Field(
        default=1000,
        ge=1,
        le=8192,
        description="Maximum tokens in response"
    )
    timeout_seconds: Optional[float] = Field(
        default=None,
        description="Request timeout; None keeps the HTTP library default (no timeout)"
    )


class AppSettings(BaseSettings):
    """
    Backend application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )

    # Storage
    storage_backend: Literal["google_sheets", "memory"] = Field(
        default="google_sheets",
        description="Which tabular store the backend uses"
    )

    # HTTP server
    host: str = Field(
        default="127.0.0.1",
        description="Interface the backend binds to"
    )
    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port the backend listens on"
    )
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class ClientSettings(BaseSettings):
    """Streamlit client configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINTRACK_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_url: str = Field(
        default="http://127.0.0.1:8000/",
        description="Backend endpoint URL"
    )
    session_path: str = Field(
        default=str(Path.home() / ".fintrack" / "session.json"),
        description="Where the logged-in username is remembered"
    )
    currency_symbol: str = Field(
        default="R$",
        description="Currency prefix used in the UI and insight prompts"
    )
    request_timeout_seconds: Optional[float] = Field(
        default=None,
        description="Request timeout; None means wait indefinitely"
    )
    insight_transaction_limit: int = Field(
        default=50,
        ge=1,
        le=500,
        description="How many recent transactions are sent for insights"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily to allow partial configuration
    # (the client never needs Google credentials, for example).

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def groq(self) -> GroqSettings:
        return GroqSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()

    @property
    def client(self) -> ClientSettings:
        return ClientSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    sections = {
        "google_sheets": lambda: settings.google_sheets,
        "groq": lambda: settings.groq,
        "app": lambda: settings.app,
        "client": lambda: settings.client,
    }

    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    # The completion key is optional for startup but worth reporting
    if results.get("groq"):
        results["groq_api_key"] = bool(settings.groq.api_key)

    return results
