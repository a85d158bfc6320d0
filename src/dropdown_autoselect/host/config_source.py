"""
Config Sources - Where the embedding shell reads form values from.

The host platform's settings store is reached through exactly one
ConfigSource, located once by the shell before any run starts.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from dropdown_autoselect.config.settings import Settings

logger = logging.getLogger(__name__)

ConfigListener = Callable[[Mapping[str, Any]], None]
Unsubscribe = Callable[[], None]


class ConfigSource(ABC):
    """Read access to host form values plus change notifications."""

    @abstractmethod
    def get(self) -> Mapping[str, Any]:
        """Current form values."""
        ...

    @abstractmethod
    def subscribe(self, listener: ConfigListener) -> Unsubscribe:
        """
        Register for change notifications.
        
        Returns:
            Callable that removes the listener (safe to call twice)
        """
        ...


class StaticConfigSource(ConfigSource):
    """
    In-memory form values, as a settings panel would hold them.
    
    Example:
        >>> source = StaticConfigSource({"targetControl": "region"})
        >>> source.update(maxRetries="5")
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, Any] = dict(values or {})
        self._listeners: List[ConfigListener] = []

    def get(self) -> Mapping[str, Any]:
        return dict(self._values)

    def update(self, values: Optional[Mapping[str, Any]] = None, **changes: Any) -> None:
        """Merge new values and notify every listener."""
        self._values.update(values or {})
        self._values.update(changes)
        snapshot = self.get()
        for listener in list(self._listeners):
            listener(snapshot)

    def subscribe(self, listener: ConfigListener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


class SettingsConfigSource(ConfigSource):
    """Form values taken from loaded Settings; never changes."""

    def __init__(self, settings: "Settings"):
        self._settings = settings

    def get(self) -> Mapping[str, Any]:
        return self._settings.selection.model_dump()

    def subscribe(self, listener: ConfigListener) -> Unsubscribe:
        return lambda: None
