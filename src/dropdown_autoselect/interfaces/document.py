"""
Document Interface - Abstract base classes for the document the engine drives.

The engine never touches a browser API directly. It evaluates page scripts
through IDocument, holds transient IDocumentElement handles for the length
of one attempt, and watches structural changes through IMutationWatch.

Example:
    >>> from dropdown_autoselect.browsers import PlaywrightBrowser
    >>> browser = PlaywrightBrowser()
    >>> await browser.launch(headless=True)
    >>> document = await browser.new_document()
    >>> await document.goto("https://example.com")
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional


MutationCallback = Callable[[int], None]


class IDocumentElement(ABC):
    """
    A live element reference.
    
    Valid only within the attempt that produced it: the page may replace
    the node at any time, so callers never keep one across attempts.
    """

    @abstractmethod
    async def evaluate(self, script: str, arg: Any = None) -> Any:
        """
        Run a script function with this element as its first argument.
        
        Args:
            script: JavaScript function expression taking (element, arg)
            arg: Optional serializable argument
            
        Returns:
            The script's serializable return value
        """
        ...

    @abstractmethod
    async def dispose(self) -> None:
        """Release the underlying handle."""
        ...


class IMutationWatch(ABC):
    """A live subscription to child-list mutations of the document body."""

    @abstractmethod
    async def start(self) -> None:
        """
        Install the watch in the document.
        
        The watch counts as active from the moment start() begins, so a
        cancel() issued while installation is in flight still tears it down.
        """
        ...

    @property
    @abstractmethod
    def active(self) -> bool:
        """Whether notifications are still delivered."""
        ...

    @abstractmethod
    async def cancel(self) -> None:
        """
        Stop watching.
        
        Idempotent: cancelling an already-cancelled watch is a no-op.
        """
        ...


class IDocument(ABC):
    """
    Abstract interface for a rendered document.
    
    The surrounding page owns and mutates the document; implementations
    must tolerate nodes disappearing between calls.
    """

    @abstractmethod
    async def evaluate(self, script: str, arg: Any = None) -> Any:
        """
        Execute a JavaScript function expression in the document.
        
        Args:
            script: JavaScript function expression
            arg: Optional serializable argument
            
        Returns:
            The script's serializable return value
        """
        ...

    @abstractmethod
    async def query_element(self, script: str, arg: Any = None) -> Optional[IDocumentElement]:
        """
        Execute a script that returns an element or null.
        
        Args:
            script: JavaScript function expression returning an element
            arg: Optional serializable argument
            
        Returns:
            Element reference, or None when the script returned no element
        """
        ...

    @abstractmethod
    def create_watch(self, callback: MutationCallback) -> IMutationWatch:
        """
        Create a watch over child-list insertions/removals of the body subtree.
        
        Nothing is installed until the caller awaits start() on the watch.
        
        Args:
            callback: Called once per mutation batch with the number of
                added nodes in that batch
                
        Returns:
            Watch handle; start it to begin, cancel it to stop notifications
        """
        ...
