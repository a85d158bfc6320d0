"""
Playwright Browser - Implementation of IDocument using Playwright.

This module provides a Playwright-based implementation of the document
interface plus a small browser launcher for the CLI and integration tests.
"""

from typing import Any, Dict, Optional
import asyncio
import logging
import uuid

from dropdown_autoselect.engine.scripts import (
    DISCONNECT_WATCH_JS,
    NOTIFY_BINDING,
    WATCH_MUTATIONS_JS,
)
from dropdown_autoselect.exceptions.browser import (
    BrowserLaunchError,
    BrowserConnectionError,
    NavigationError,
)
from dropdown_autoselect.interfaces.document import (
    IDocument,
    IDocumentElement,
    IMutationWatch,
    MutationCallback,
)

logger = logging.getLogger(__name__)

BROWSER_TYPES = ("chromium", "firefox", "webkit")


class PlaywrightElement(IDocumentElement):
    """
    Playwright implementation of IDocumentElement.
    
    Wraps a Playwright ElementHandle.
    """
    
    def __init__(self, element: Any):
        self._element = element
    
    async def evaluate(self, script: str, arg: Any = None) -> Any:
        """Run a script against this element."""
        return await self._element.evaluate(script, arg)
    
    async def dispose(self) -> None:
        """Release the handle."""
        await self._element.dispose()


class PlaywrightMutationWatch(IMutationWatch):
    """
    MutationObserver installed in the page under its own window key.
    
    Batches come back through the document's single notify binding, which
    routes them here by key while the watch is registered.
    """
    
    def __init__(self, document: "PlaywrightDocument", callback: MutationCallback):
        self._document = document
        self._callback = callback
        self._key = f"__dropdownAutoselectObserver_{uuid.uuid4().hex[:8]}"
        self._active = False
    
    @property
    def key(self) -> str:
        return self._key
    
    @property
    def active(self) -> bool:
        return self._active
    
    async def start(self) -> None:
        """Register with the document, then install the observer."""
        self._active = True
        self._document.register_watch(self)
        await self._document.ensure_notify_binding()
        await self._document.page.evaluate(WATCH_MUTATIONS_JS, [self._key, NOTIFY_BINDING])
    
    def deliver(self, added: int) -> None:
        if self._active:
            self._callback(int(added or 0))
    
    async def cancel(self) -> None:
        """Disconnect the observer (no-op when already cancelled)."""
        if not self._active:
            return
        self._active = False
        self._document.unregister_watch(self)
        try:
            await self._document.page.evaluate(DISCONNECT_WATCH_JS, self._key)
        except Exception as e:
            # Page already closed or navigated away; nothing left to disconnect
            logger.debug(f"Observer disconnect skipped: {e}")


class PlaywrightDocument(IDocument):
    """
    Playwright implementation of IDocument.
    
    Wraps a Playwright Page. Bindings cannot be removed from a page, so one
    notify binding is exposed per page and shared by all of its watches.
    """
    
    def __init__(self, page: Any):
        """
        Initialize the document wrapper.
        
        Args:
            page: Playwright Page object
        """
        self._page = page
        self._watches: Dict[str, PlaywrightMutationWatch] = {}
        self._binding_exposed = False
        self._binding_lock = asyncio.Lock()
    
    @property
    def page(self) -> Any:
        """The wrapped Playwright page."""
        return self._page
    
    @property
    def url(self) -> str:
        return self._page.url
    
    async def goto(self, url: str, **options: Any) -> None:
        """Navigate to URL."""
        try:
            await self._page.goto(url, **options)
        except Exception as e:
            raise NavigationError(f"Failed to navigate to {url}: {e}", url=url)
    
    async def set_content(self, html: str) -> None:
        """Replace the document with the given markup."""
        await self._page.set_content(html)
    
    async def evaluate(self, script: str, arg: Any = None) -> Any:
        """Execute JavaScript."""
        return await self._page.evaluate(script, arg)
    
    async def query_element(self, script: str, arg: Any = None) -> Optional[IDocumentElement]:
        """Execute JavaScript returning an element or null."""
        handle = await self._page.evaluate_handle(script, arg)
        element = handle.as_element()
        if element is None:
            await handle.dispose()
            return None
        return PlaywrightElement(element)
    
    def create_watch(self, callback: MutationCallback) -> IMutationWatch:
        """Create a body-wide child-list watch (installed by start())."""
        return PlaywrightMutationWatch(self, callback)
    
    def register_watch(self, watch: PlaywrightMutationWatch) -> None:
        self._watches[watch.key] = watch
    
    def unregister_watch(self, watch: PlaywrightMutationWatch) -> None:
        self._watches.pop(watch.key, None)
    
    async def ensure_notify_binding(self) -> None:
        """Expose the shared notify binding once for this page."""
        async with self._binding_lock:
            if not self._binding_exposed:
                await self._page.expose_function(NOTIFY_BINDING, self._dispatch)
                self._binding_exposed = True
    
    def _dispatch(self, key: str, added: int) -> None:
        watch = self._watches.get(key)
        if watch is not None:
            watch.deliver(added)
    
    async def close(self) -> None:
        """Close page."""
        await self._page.close()


class PlaywrightBrowser:
    """
    Launches a Playwright browser and opens documents in it.
    
    Example:
        >>> browser = PlaywrightBrowser()
        >>> await browser.launch(headless=True)
        >>> document = await browser.new_document()
        >>> await document.goto("https://example.com")
        >>> await browser.close()
    """
    
    def __init__(self):
        """Initialize the browser (not launched yet)."""
        self._playwright: Any = None
        self._browser: Any = None
        self._context: Any = None
    
    @property
    def is_connected(self) -> bool:
        """Check if browser is connected."""
        return self._browser is not None and self._browser.is_connected()
    
    async def launch(
        self,
        headless: bool = True,
        browser_type: str = "chromium",
        **options: Any,
    ) -> None:
        """
        Launch the browser.
        
        Args:
            headless: Whether to run headless
            browser_type: chromium, firefox or webkit
            **options: Additional Playwright launch options
        """
        if browser_type not in BROWSER_TYPES:
            raise BrowserLaunchError(f"Unsupported browser type: {browser_type}")
        
        try:
            from playwright.async_api import async_playwright
            
            self._playwright = await async_playwright().start()
            launcher = getattr(self._playwright, browser_type)
            self._browser = await launcher.launch(headless=headless, **options)
            
            logger.info(f"Launched {browser_type} browser (headless={headless})")
            
        except Exception as e:
            await self.close()
            raise BrowserLaunchError(f"Failed to launch browser: {e}")
    
    async def new_document(self, **options: Any) -> PlaywrightDocument:
        """
        Open a new page.
        
        Args:
            **options: Context options (viewport, etc.)
        """
        if not self._browser:
            raise BrowserConnectionError("Browser not launched. Call launch() first.")
        
        if not self._context:
            self._context = await self._browser.new_context(**options)
        
        page = await self._context.new_page()
        return PlaywrightDocument(page)
    
    async def close(self) -> None:
        """Close the browser and cleanup."""
        if self._context:
            await self._context.close()
            self._context = None
        
        if self._browser:
            await self._browser.close()
            self._browser = None
        
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
        
        logger.info("Browser closed")
