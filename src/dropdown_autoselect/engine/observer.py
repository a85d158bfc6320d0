"""
Observer Fallback - Mutation-driven attempts under a wall-clock timeout.

Entered once fixed retries are exhausted. The watch is created before it is
installed, so it is cancelled on every way out of observe(), including a
cancellation or error that lands while installation is still in flight.
"""

from typing import Optional, TYPE_CHECKING
import asyncio
import logging

from dropdown_autoselect.engine.models import OutcomeKind, SelectionOutcome
from dropdown_autoselect.engine.retry_controller import AttemptFn
from dropdown_autoselect.utils.retry import with_timeout

if TYPE_CHECKING:
    from dropdown_autoselect.engine.sink import ISelectionSink
    from dropdown_autoselect.interfaces.document import IDocument, IMutationWatch

logger = logging.getLogger(__name__)


class ObserverFallback:
    """
    Re-attempt selection once per mutation batch that adds nodes.
    
    Batches are queued and drained one attempt at a time, so attempts
    never overlap even when the page mutates during an attempt.
    """
    
    def __init__(
        self,
        document: "IDocument",
        attempt: AttemptFn,
        sink: "ISelectionSink",
        timeout_ms: int,
    ):
        self._document = document
        self._attempt = attempt
        self._sink = sink
        self._timeout_ms = timeout_ms
        self._watch: Optional["IMutationWatch"] = None
    
    @property
    def watch(self) -> Optional["IMutationWatch"]:
        return self._watch
    
    async def observe(self) -> Optional[SelectionOutcome]:
        """
        Watch until an attempt settles or the timeout elapses.
        
        Returns:
            The settling outcome, or None on timeout
        """
        batches: "asyncio.Queue[int]" = asyncio.Queue()
        self._watch = self._document.create_watch(batches.put_nowait)
        
        try:
            await self._watch.start()
            self._sink.log(f"Observing document changes for up to {self._timeout_ms} ms")
            return await with_timeout(
                self._drain(batches),
                self._timeout_ms / 1000,
                error_message=f"No selection within {self._timeout_ms} ms",
            )
        except asyncio.TimeoutError:
            self._sink.log(f"Timed out after {self._timeout_ms} ms without a selection")
            return None
        finally:
            await self._watch.cancel()
    
    async def _drain(self, batches: "asyncio.Queue[int]") -> SelectionOutcome:
        while True:
            added = await batches.get()
            if added <= 0:
                continue
            
            logger.debug(f"Mutation batch added {added} node(s)")
            outcome = await self._attempt()
            if outcome.kind != OutcomeKind.NOT_FOUND:
                return outcome
