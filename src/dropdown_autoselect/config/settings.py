"""
Settings - Pydantic models for type-safe configuration.

This module defines all configuration settings as Pydantic models,
providing validation, type hints, and automatic environment variable loading.

Example:
    >>> from dropdown_autoselect.config import Settings, load_config
    >>> settings = load_config()  # Loads from env, yaml, and defaults
    >>> print(settings.selection.max_retries)
    3
"""

from typing import Literal, Optional, TYPE_CHECKING
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from dropdown_autoselect.engine.models import SelectionConfig


class SelectionSettings(BaseModel):
    """
    Auto-selection settings.
    
    Attributes:
        target_control: Identifier of the control to operate on
        max_retries: Retries after the first attempt before observing
        retry_delay_ms: Delay between retry attempts
        observer_timeout_ms: How long to watch for mutations after retries
        settle_delay_ms: Wait after opening a custom widget
        await_custom_widget: Suspend the loop until the widget check resolves
        trigger_on_load: Start a run as soon as a config is available
    """
    target_control: Optional[str] = None
    max_retries: int = Field(default=3, ge=0, le=100)
    retry_delay_ms: int = Field(default=1000, ge=0, le=60000)
    observer_timeout_ms: int = Field(default=10000, ge=0, le=600000)
    settle_delay_ms: int = Field(default=200, ge=0, le=10000)
    await_custom_widget: bool = True
    trigger_on_load: bool = True
    
    def to_config(self, **overrides) -> "SelectionConfig":
        """
        Build the immutable per-run config.
        
        Raises:
            NotConfiguredError: If no target control is set
        """
        from dropdown_autoselect.engine.models import SelectionConfig
        
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return SelectionConfig.from_form(values)


class BrowserSettings(BaseModel):
    """
    Browser automation settings.
    
    Attributes:
        browser_type: Playwright browser to launch
        headless: Run browser in headless mode
        timeout_ms: Default timeout for navigation
        slow_mo: Slow down operations by this amount (ms) - useful for debugging
    """
    browser_type: Literal["chromium", "firefox", "webkit"] = "chromium"
    headless: bool = True
    timeout_ms: int = Field(default=30000, ge=1000, le=300000)
    slow_mo: int = Field(default=0, ge=0, le=5000)


class LoggingSettings(BaseModel):
    """
    Logging configuration.
    
    Attributes:
        level: Log level
        file: Log file path (None for console only)
        json_format: Use JSON format for file logs
    """
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = None
    json_format: bool = False


class Settings(BaseSettings):
    """
    Root settings container - single source of truth for all configuration.
    
    Settings are loaded in this priority order (highest to lowest):
    1. Explicit values passed to constructor
    2. Environment variables (prefixed with DROPDOWN_AUTOSELECT__)
    3. Config file (YAML)
    4. Default values
    
    Example:
        >>> settings = Settings()  # Load from env vars
        >>> settings = Settings(selection=SelectionSettings(target_control="region"))
    """
    
    model_config = SettingsConfigDict(
        env_prefix="DROPDOWN_AUTOSELECT__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )
    
    selection: SelectionSettings = Field(default_factory=SelectionSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    
    debug: bool = False
    
    def merge_with(self, overrides: dict) -> "Settings":
        """
        Create a new Settings instance with overrides applied.
        
        Args:
            overrides: Dictionary of values to override
            
        Returns:
            New Settings instance with overrides applied
        """
        current = self.model_dump()
        
        def deep_merge(base: dict, updates: dict) -> dict:
            for key, value in updates.items():
                if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                    deep_merge(base[key], value)
                else:
                    base[key] = value
            return base
        
        merged = deep_merge(current, overrides)
        return Settings(**merged)
