"""
Exceptions module - Custom exception hierarchy.

This module defines all custom exceptions used throughout Dropdown Auto-Select,
providing clear error types for different failure scenarios.
"""

from dropdown_autoselect.exceptions.base import (
    DropdownAutoSelectError,
    ConfigurationError,
    NotConfiguredError,
)
from dropdown_autoselect.exceptions.browser import (
    BrowserError,
    BrowserLaunchError,
    BrowserConnectionError,
    NavigationError,
)
from dropdown_autoselect.exceptions.selection import (
    SelectionError,
    ResolutionFailure,
    EmptyOptionsFailure,
    RuntimeFault,
    SelectionTimeoutError,
)

__all__ = [
    # Base exceptions
    "DropdownAutoSelectError",
    "ConfigurationError",
    "NotConfiguredError",
    # Browser exceptions
    "BrowserError",
    "BrowserLaunchError",
    "BrowserConnectionError",
    "NavigationError",
    # Selection exceptions
    "SelectionError",
    "ResolutionFailure",
    "EmptyOptionsFailure",
    "RuntimeFault",
    "SelectionTimeoutError",
]
