"""Configuration package."""

from fintrack.config.settings import (
    AppSettings,
    ClientSettings,
    GoogleSheetsSettings,
    GroqSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ClientSettings",
    "GoogleSheetsSettings",
    "GroqSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
