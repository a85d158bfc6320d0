"""
Utilities module - Common utility functions.
"""

from dropdown_autoselect.utils.logging import setup_logging
from dropdown_autoselect.utils.retry import wait_for_capability, with_timeout

__all__ = [
    "setup_logging",
    "wait_for_capability",
    "with_timeout",
]
