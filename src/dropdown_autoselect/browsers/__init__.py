"""
Browsers module - Document implementations backed by real browsers.
"""

from dropdown_autoselect.browsers.playwright_browser import (
    PlaywrightBrowser,
    PlaywrightDocument,
    PlaywrightElement,
    PlaywrightMutationWatch,
)

__all__ = [
    "PlaywrightBrowser",
    "PlaywrightDocument",
    "PlaywrightElement",
    "PlaywrightMutationWatch",
]
