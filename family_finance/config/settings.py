"""
Configuration Management for Family Finance

Typed configuration read from the environment and an optional .env file.

DESIGN DECISION: Every environment variable the app reads is declared here.
Supabase credentials are required only when the hosted backend is used;
without them the app runs offline on in-memory storage.
"""

from functools import lru_cache
from typing import Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SupabaseSettings(BaseSettings):
    """Hosted database and auth service configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SUPABASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    url: str = Field(
        ...,
        description="Supabase project URL"
    )
    anon_key: str = Field(
        ...,
        description="Supabase anon (public) API key"
    )

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Project URLs must be http(s)."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Supabase URL must start with http:// or https://, got {v!r}")
        return v.rstrip("/")


class AppSettings(BaseSettings):
    """Behaviour of the app itself: environment, localization, reporting, demo users."""

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

    # Localization
    default_language: str = Field(
        default="zh",
        pattern="^(zh|en)$",
        description="Language shown before the user picks one"
    )

    # Reporting
    reporting_currency: str = Field(
        default="CAD",
        min_length=3,
        max_length=3,
        description="Only this currency counts toward summary totals and shares"
    )
    default_currency: str = Field(
        default="CAD",
        min_length=3,
        max_length=3,
        description="Currency preselected on new records"
    )

    # Demo users get a hardcoded fixed-expense list
    demo_emails: str = Field(
        default="demo1@example.com,demo2@example.com",
        description="Comma-separated list of demo account emails"
    )

    @property
    def demo_emails_list(self) -> list[str]:
        """Get demo emails as a list."""
        return [e.strip().lower() for e in self.demo_emails.split(",") if e.strip()]

    def is_demo_email(self, email: Optional[str]) -> bool:
        return bool(email) and email.strip().lower() in self.demo_emails_list


class Settings(BaseSettings):
    """
    Entry point for all settings groups.

    Each group is built on access, so a missing Supabase key only fails
    the code paths that need the hosted backend.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def supabase(self) -> SupabaseSettings:
        return SupabaseSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    The process-wide Settings instance.

    Tests can reset it with get_settings.cache_clear().
    """
    return Settings()


def validate_all_settings() -> dict[str, Union[bool, str]]:
    """
    Try to build every settings group.

    Returns {group: ok} plus {group}_error messages; shown on the settings page.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.supabase
        results["supabase"] = True
    except Exception as e:
        results["supabase"] = False
        results["supabase_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
