"""
Selection Run - Retry, then observe, then report exactly once.

A run owns its attempt counter, at most one live timer or mutation watch,
and any deferred custom-widget checks it spawned. All of them are torn
down when the run reaches SUCCEEDED or TIMED_OUT, including through the
explicit cancel() hook.

Example:
    >>> config = SelectionConfig.from_form({"targetControl": "region"})
    >>> result = await SelectionRun(config, document).run()
    >>> result.state, result.selected_label
    (<RunState.SUCCEEDED: 'succeeded'>, 'North')
"""

from typing import Optional, Set, TYPE_CHECKING
import asyncio
import logging

from dropdown_autoselect.engine.models import (
    RunResult,
    RunState,
    SelectionConfig,
    SelectionOutcome,
)
from dropdown_autoselect.engine.observer import ObserverFallback
from dropdown_autoselect.engine.option_selector import OptionSelector
from dropdown_autoselect.engine.retry_controller import RetryController
from dropdown_autoselect.engine.sink import ISelectionSink, LoggingSink
from dropdown_autoselect.engine.target_resolver import ResolvedElement, TargetResolver
from dropdown_autoselect.exceptions import (
    ResolutionFailure,
    RuntimeFault,
    SelectionError,
    SelectionTimeoutError,
)

if TYPE_CHECKING:
    from dropdown_autoselect.interfaces.document import IDocument

logger = logging.getLogger(__name__)


class SelectionRun:
    """
    One auto-selection run over one document.

    Single use: the attempt counter starts at zero when the run starts and
    is never shared with another run.
    """

    def __init__(
        self,
        config: SelectionConfig,
        document: "IDocument",
        sink: Optional[ISelectionSink] = None,
        resolver: Optional[TargetResolver] = None,
    ):
        self._config = config
        self._document = document
        self._sink = sink or LoggingSink()
        self._resolver = resolver or TargetResolver()
        self._selector = OptionSelector(document, self._sink, config.settle_delay_ms)

        self._state = RunState.SEARCHING
        self._attempts = 0
        self._pending: Set["asyncio.Task[SelectionOutcome]"] = set()
        self._observer: Optional[ObserverFallback] = None
        self._task: Optional["asyncio.Task[RunResult]"] = None
        self._result: Optional[RunResult] = None
        self._cancel_requested = False

    @property
    def config(self) -> SelectionConfig:
        return self._config

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def attempts(self) -> int:
        """Resolver invocations so far."""
        return self._attempts

    @property
    def result(self) -> Optional[RunResult]:
        return self._result

    @property
    def done(self) -> bool:
        return self._result is not None

    def start(self) -> "asyncio.Task[RunResult]":
        """Schedule the run on the running loop (idempotent)."""
        if self._task is None:
            self._task = asyncio.create_task(self._execute())
            self._task.add_done_callback(self._on_task_done)
        return self._task

    async def wait(self) -> RunResult:
        """Wait for the terminal result."""
        task = self.start()
        await asyncio.wait({task})
        if task.cancelled():
            return self._finish(RunState.TIMED_OUT, cancelled=True)
        return task.result()

    def _on_task_done(self, task: "asyncio.Task[RunResult]") -> None:
        # Cancelled before its first step, so _execute never ran
        if task.cancelled():
            self._finish(RunState.TIMED_OUT, cancelled=True)

    async def run(self) -> RunResult:
        """Start the run and wait for its terminal result."""
        self.start()
        return await self.wait()

    def cancel(self) -> None:
        """
        Abort the run: tear down the current timer/watch and force TIMED_OUT.

        No-op once the run is terminal.
        """
        if self.done:
            return
        self._cancel_requested = True
        self._cancel_pending()
        if self._task is not None:
            self._task.cancel()
        else:
            self._finish(RunState.TIMED_OUT, cancelled=True)

    async def _execute(self) -> RunResult:
        self._attempts = 0
        self._sink.log(f"Looking for control '{self._config.target_control_id}'")

        try:
            retry = RetryController(self._config, self._attempt, self._sink, self._set_state)
            outcome = await retry.run()

            if outcome is None:
                self._set_state(RunState.OBSERVING)
                self._observer = ObserverFallback(
                    self._document,
                    self._attempt,
                    self._sink,
                    self._config.observer_timeout_ms,
                )
                outcome = await self._observe()
        except asyncio.CancelledError:
            if not self._cancel_requested:
                raise
            self._sink.log("Run cancelled")
            return self._finish(RunState.TIMED_OUT, cancelled=True)
        finally:
            if self._observer is not None and self._observer.watch is not None:
                await self._observer.watch.cancel()

        if outcome is None:
            return self._finish(RunState.TIMED_OUT)

        if outcome.is_success:
            self._sink.log(f"Selected '{outcome.selected_label}' via {outcome.via.value}")
        else:
            self._sink.log("Custom widget opened; option result follows asynchronously")
        return self._finish(RunState.SUCCEEDED, outcome)

    async def _observe(self) -> Optional[SelectionOutcome]:
        """Observer phase; a document failure ends it like a timeout."""
        try:
            return await self._observer.observe()
        except Exception as e:
            fault = RuntimeFault(f"Observing the document failed: {e}", cause=e)
            logger.warning(fault.message)
            self._sink.log(fault.message)
            return None

    async def _attempt(self) -> SelectionOutcome:
        """One resolve+select cycle; every failure becomes NOT_FOUND."""
        self._attempts += 1
        number = self._attempts
        target_id = self._config.target_control_id

        try:
            resolved = await self._resolver.resolve(target_id, self._document)
            if resolved is None:
                raise ResolutionFailure(target_id)

            self._sink.log(f"Attempt {number}: found '{target_id}' by {resolved.strategy.value}")
            try:
                outcome = await self._selector.select(resolved)
            finally:
                await self._release(resolved)
        except SelectionError as e:
            self._sink.log(f"Attempt {number}: {e.message}")
            return SelectionOutcome.not_found(reason=e.message)
        except Exception as e:
            fault = RuntimeFault(f"Attempt {number} failed unexpectedly: {e}", cause=e)
            logger.warning(fault.message)
            self._sink.log(fault.message)
            return SelectionOutcome.not_found(reason=fault.message)

        if outcome.is_pending and outcome.pending is not None:
            self._pending.add(outcome.pending)
            outcome.pending.add_done_callback(self._pending.discard)
            if self._config.await_custom_widget:
                outcome = await outcome.pending

        return outcome

    async def _release(self, resolved: ResolvedElement) -> None:
        try:
            await resolved.element.dispose()
        except Exception as e:
            logger.debug(f"Element handle release failed: {e}")

    def _set_state(self, state: RunState) -> None:
        if state != self._state:
            logger.debug(f"Run state {self._state.value} -> {state.value}")
        self._state = state

    def _cancel_pending(self) -> None:
        for task in list(self._pending):
            task.cancel()
        self._pending.clear()

    def _finish(
        self,
        state: RunState,
        outcome: Optional[SelectionOutcome] = None,
        cancelled: bool = False,
    ) -> RunResult:
        if self._result is not None:
            return self._result

        self._set_state(state)
        error = None
        if state == RunState.TIMED_OUT:
            self._cancel_pending()
            reason = "cancelled" if cancelled else "timed out"
            error = SelectionTimeoutError(
                f"Selecting '{self._config.target_control_id}' {reason}",
                timeout_ms=self._config.observer_timeout_ms,
                attempts=self._attempts,
            )
            if not cancelled:
                self._sink.log(f"Gave up on '{self._config.target_control_id}'")

        self._result = RunResult(
            state=state,
            outcome=outcome,
            attempts=self._attempts,
            error=error,
            cancelled=cancelled,
        )
        self._sink.complete(self._result)
        return self._result


async def auto_select(
    document: "IDocument",
    config: SelectionConfig,
    sink: Optional[ISelectionSink] = None,
) -> RunResult:
    """
    Run the engine once and return its terminal result.

    Args:
        document: Document to operate on
        config: Per-run configuration
        sink: Optional progress/result sink (defaults to logging)
    """
    return await SelectionRun(config, document, sink=sink).run()
