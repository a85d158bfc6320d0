"""
Retry Controller - Bounded fixed-delay attempts before observation.

Searching -> success: done
Searching -> not found: RetryWaiting -> Searching (counter + 1)
When the counter has reached max_retries, the controller stops and the
run moves on to observing instead of waiting again.
"""

from typing import Awaitable, Callable, Optional, TYPE_CHECKING
import asyncio
import logging

from dropdown_autoselect.engine.models import OutcomeKind, RunState, SelectionOutcome

if TYPE_CHECKING:
    from dropdown_autoselect.engine.models import SelectionConfig
    from dropdown_autoselect.engine.sink import ISelectionSink

logger = logging.getLogger(__name__)

AttemptFn = Callable[[], Awaitable[SelectionOutcome]]
StateFn = Callable[[RunState], None]


class RetryController:
    """
    Drive resolve+select attempts with a fixed delay between them.
    
    Makes exactly max_retries + 1 attempts when none succeeds.
    """
    
    def __init__(
        self,
        config: "SelectionConfig",
        attempt: AttemptFn,
        sink: "ISelectionSink",
        on_state: StateFn,
    ):
        self._config = config
        self._attempt = attempt
        self._sink = sink
        self._on_state = on_state
        self.retries = 0
    
    async def run(self) -> Optional[SelectionOutcome]:
        """
        Run the retry phase.
        
        Returns:
            The settling outcome, or None when retries are exhausted
        """
        total = self._config.max_retries + 1
        self.retries = 0
        
        while True:
            self._on_state(RunState.SEARCHING)
            number = self.retries + 1
            outcome = await self._attempt()
            
            if outcome.kind != OutcomeKind.NOT_FOUND:
                return outcome
            
            if self.retries >= self._config.max_retries:
                self._sink.log(
                    f"Attempt {number}/{total} failed; retries exhausted, "
                    f"watching the document for changes"
                )
                return None
            
            self._sink.log(
                f"Attempt {number}/{total} failed; retrying in {self._config.retry_delay_ms} ms"
            )
            self._on_state(RunState.RETRY_WAITING)
            await asyncio.sleep(self._config.retry_delay_ms / 1000)
            self.retries += 1
