"""
Selection Sink - Where a run reports progress lines and its final result.

The sink is the embedding shell's side of the boundary. LoggingSink routes
everything to the standard logging tree; RecordingSink also keeps the
ordered line stream in memory for status panels and tests.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from dropdown_autoselect.engine.models import RunResult

logger = logging.getLogger("dropdown_autoselect.engine")


class ISelectionSink(ABC):
    """Receiver of progress lines and the terminal result of a run."""

    @abstractmethod
    def log(self, message: str) -> None:
        """Append one human-readable progress line."""
        ...

    @abstractmethod
    def complete(self, result: RunResult) -> None:
        """Receive the terminal result; called exactly once per run."""
        ...


class LoggingSink(ISelectionSink):
    """Forward progress lines to logging."""

    def __init__(self, log: logging.Logger = logger):
        self._logger = log

    def log(self, message: str) -> None:
        self._logger.info(message)

    def complete(self, result: RunResult) -> None:
        if result.succeeded:
            self._logger.info(f"Run succeeded after {result.attempts} attempt(s)")
        else:
            self._logger.warning(f"Run timed out after {result.attempts} attempt(s)")


class RecordingSink(LoggingSink):
    """
    Keep every line and result in order while still forwarding to logging.

    Example:
        >>> sink = RecordingSink()
        >>> result = await SelectionRun(config, document, sink=sink).run()
        >>> sink.lines[-1]
    """

    def __init__(self, log: logging.Logger = logger):
        super().__init__(log)
        self.lines: List[str] = []
        self.results: List[RunResult] = []

    def log(self, message: str) -> None:
        self.lines.append(message)
        super().log(message)

    def complete(self, result: RunResult) -> None:
        self.results.append(result)
        super().complete(result)

    def contains(self, fragment: str) -> bool:
        """Whether any recorded line contains the fragment."""
        return any(fragment in line for line in self.lines)
