"""
Host module - Embedding shell and config sources.
"""

from dropdown_autoselect.host.config_source import (
    ConfigSource,
    StaticConfigSource,
    SettingsConfigSource,
)
from dropdown_autoselect.host.shell import AutoSelectShell

__all__ = [
    "ConfigSource",
    "StaticConfigSource",
    "SettingsConfigSource",
    "AutoSelectShell",
]
