"""
Test fixtures for engine module tests.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional, Tuple

from dropdown_autoselect.engine.scripts import (
    OPEN_WIDGET_JS,
    PICK_VISIBLE_OPTION_JS,
    SELECT_NATIVE_JS,
    TAG_NAME_JS,
)
from dropdown_autoselect.engine.target_resolver import ResolutionStrategy, STRATEGY_SCRIPTS
from dropdown_autoselect.interfaces.document import (
    IDocument,
    IDocumentElement,
    IMutationWatch,
    MutationCallback,
)


# =============================================================================
# MOCK DOCUMENT
# =============================================================================

class MockElement(IDocumentElement):
    """
    Mock element answering the engine's page scripts.
    
    Native selects emulate selectedIndex and event dispatch; other tags
    count clicks and run an optional on_click hook.
    """
    
    def __init__(
        self,
        tag: str = "div",
        options: Optional[List[Tuple[str, str]]] = None,
        on_click: Optional[Callable[[], None]] = None,
        fail_with: Optional[Exception] = None,
    ):
        self.tag = tag
        self.options = options or []
        self.on_click = on_click
        self.fail_with = fail_with
        self.selected_index = -1
        self.events: List[str] = []
        self.clicks = 0
        self.disposed = False
    
    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if self.fail_with is not None:
            raise self.fail_with
        if script == TAG_NAME_JS:
            return self.tag.upper()
        if script == SELECT_NATIVE_JS:
            return self._select_first()
        if script == OPEN_WIDGET_JS:
            self.clicks += 1
            if self.on_click:
                self.on_click()
            return None
        raise AssertionError(f"Unexpected element script: {script[:40]}")
    
    async def dispose(self) -> None:
        self.disposed = True
    
    def _select_first(self) -> Dict[str, Any]:
        if not self.options:
            return {"ok": False, "reason": "no options"}
        value, text = self.options[0]
        start = 1 if value == "" and text.strip() == "" else 0
        if start >= len(self.options):
            return {"ok": False, "reason": "only a placeholder option"}
        self.selected_index = start
        self.events.extend(["change", "input"])
        return {"ok": True, "index": start, "label": self.options[start][1].strip()}


class MockOption:
    """Option-shaped element of an opened custom widget."""
    
    def __init__(self, text: str, width: float = 120, height: float = 24):
        self.text = text
        self.width = width
        self.height = height
        self.clicked = False


class MockWatch(IMutationWatch):
    """
    Mutation watch fed by MockDocument.mutate().
    
    start() can be slowed with install_delay or made to fail with
    install_error; the watch is active from the moment start() begins.
    """
    
    def __init__(
        self,
        callback: MutationCallback,
        install_delay: float = 0,
        install_error: Optional[Exception] = None,
    ):
        self._callback = callback
        self._active = False
        self.install_delay = install_delay
        self.install_error = install_error
        self.installed = False
        self.cancel_calls = 0
    
    @property
    def active(self) -> bool:
        return self._active
    
    async def start(self) -> None:
        self._active = True
        if self.install_delay:
            await asyncio.sleep(self.install_delay)
        if self.install_error is not None:
            raise self.install_error
        self.installed = True
    
    async def cancel(self) -> None:
        self.cancel_calls += 1
        self._active = False
    
    def fire(self, added: int) -> None:
        if self._active:
            self._callback(added)


class MockDocument(IDocument):
    """
    Mock document: each resolution strategy answers with a preset element.
    
    Example:
        >>> document = MockDocument()
        >>> document.place(ResolutionStrategy.EXACT_ATTRIBUTE, MockElement("select", [("a", "A")]))
    """
    
    def __init__(
        self,
        options: Optional[List[MockOption]] = None,
        install_delay: float = 0,
        watch_error: Optional[Exception] = None,
    ):
        self.matches: Dict[str, MockElement] = {}
        self.options: List[MockOption] = options or []
        self.queries: List[Tuple[ResolutionStrategy, str]] = []
        self.watches: List[MockWatch] = []
        self.query_error: Optional[Exception] = None
        self.on_resolve: Optional[Callable[[int], None]] = None
        self.install_delay = install_delay
        self.watch_error = watch_error
        self._strategy_for = {script: strategy for strategy, script in STRATEGY_SCRIPTS.items()}
    
    def place(self, strategy: ResolutionStrategy, element: MockElement) -> MockElement:
        self.matches[STRATEGY_SCRIPTS[strategy]] = element
        return element
    
    def clear(self) -> None:
        self.matches.clear()
    
    @property
    def resolve_calls(self) -> int:
        """Resolver invocations (each one starts with the exact strategy)."""
        return sum(1 for strategy, _ in self.queries if strategy == ResolutionStrategy.EXACT_ATTRIBUTE)
    
    def mutate(self, added: int = 1) -> None:
        for watch in self.watches:
            watch.fire(added)
    
    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if script == PICK_VISIBLE_OPTION_JS:
            visible = [o for o in self.options if o.width > 0 and o.height > 0]
            if not visible:
                return None
            visible[0].clicked = True
            return visible[0].text.strip()
        raise AssertionError(f"Unexpected document script: {script[:40]}")
    
    async def query_element(self, script: str, arg: Any = None) -> Optional[IDocumentElement]:
        strategy = self._strategy_for[script]
        self.queries.append((strategy, arg))
        if strategy == ResolutionStrategy.EXACT_ATTRIBUTE and self.on_resolve:
            self.on_resolve(self.resolve_calls)
        if self.query_error is not None:
            raise self.query_error
        return self.matches.get(script)
    
    def create_watch(self, callback: MutationCallback) -> IMutationWatch:
        watch = MockWatch(callback, self.install_delay, self.watch_error)
        self.watches.append(watch)
        return watch


def native_select(*options: Tuple[str, str]) -> MockElement:
    """A native <select> with (value, text) options."""
    return MockElement(tag="select", options=list(options))


async def wait_until(condition: Callable[[], Any], timeout: float = 2.0) -> None:
    """Yield to the loop until condition() is truthy."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not condition():
        if loop.time() > deadline:
            raise AssertionError("Condition not reached in time")
        await asyncio.sleep(0.005)
