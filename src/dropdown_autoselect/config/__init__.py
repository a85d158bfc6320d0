"""
Configuration module - Centralized settings management.

This module provides type-safe configuration management using Pydantic,
supporting environment variables, YAML files, and CLI arguments.

Usage:
    from dropdown_autoselect.config import get_settings, load_config
    
    # Get global settings (loaded once)
    settings = get_settings()
    
    # Or load fresh settings with overrides
    settings = load_config(selection={"target_control": "region"})

Environment Variables:
    DROPDOWN_AUTOSELECT__SELECTION__TARGET_CONTROL=region
    DROPDOWN_AUTOSELECT__SELECTION__MAX_RETRIES=5
    DROPDOWN_AUTOSELECT__BROWSER__HEADLESS=false
"""

from dropdown_autoselect.config.settings import (
    Settings,
    SelectionSettings,
    BrowserSettings,
    LoggingSettings,
)
from dropdown_autoselect.config.loader import ConfigLoader, load_config

# Global settings singleton
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).
    
    Settings are loaded once from environment variables and config files.
    Call reset_settings() to reload.
    """
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def reset_settings() -> None:
    """Reset the global settings (forces reload on next get_settings())."""
    global _settings
    _settings = None


__all__ = [
    "Settings",
    "SelectionSettings",
    "BrowserSettings",
    "LoggingSettings",
    "ConfigLoader",
    "load_config",
    "get_settings",
    "reset_settings",
]
