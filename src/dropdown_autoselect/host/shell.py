"""
Auto-Select Shell - Embeds the engine in a host page.

Waits for the host's config source, mirrors its values into a
SelectionConfig, and starts a run on load or on demand. Only one run is
live at a time: starting a new one cancels the previous run first.
"""

from typing import Any, Callable, Mapping, Optional, TYPE_CHECKING
import logging

from dropdown_autoselect.engine.engine import SelectionRun
from dropdown_autoselect.engine.models import RunResult, SelectionConfig
from dropdown_autoselect.exceptions import NotConfiguredError
from dropdown_autoselect.host.config_source import ConfigSource, Unsubscribe
from dropdown_autoselect.utils.retry import wait_for_capability

if TYPE_CHECKING:
    from dropdown_autoselect.engine.sink import ISelectionSink
    from dropdown_autoselect.interfaces.document import IDocument

logger = logging.getLogger(__name__)

SourceLocator = Callable[[], Optional[ConfigSource]]


class AutoSelectShell:
    """
    Host-side glue around SelectionRun.
    
    Example:
        >>> shell = AutoSelectShell(document, lambda: source)
        >>> await shell.connect()
        >>> shell.status
        'Configured: region'
    """
    
    def __init__(
        self,
        document: "IDocument",
        locate_source: SourceLocator,
        sink: Optional["ISelectionSink"] = None,
        poll_interval_ms: int = 500,
        connect_timeout_ms: int = 10000,
    ):
        """
        Initialize the shell.
        
        Args:
            document: Document the engine operates on
            locate_source: Returns the host config source once it exists
            sink: Progress/result sink passed to every run
            poll_interval_ms: Delay between source lookups
            connect_timeout_ms: Give up looking for the source after this
        """
        self._document = document
        self._locate_source = locate_source
        self._sink = sink
        self._poll_interval_ms = poll_interval_ms
        self._connect_timeout_ms = connect_timeout_ms
        
        self._source: Optional[ConfigSource] = None
        self._unsubscribe: Optional[Unsubscribe] = None
        self._config: Optional[SelectionConfig] = None
        self._run: Optional[SelectionRun] = None
        self.status = "Initializing..."
    
    @property
    def connected(self) -> bool:
        return self._source is not None
    
    @property
    def config(self) -> Optional[SelectionConfig]:
        return self._config
    
    @property
    def current_run(self) -> Optional[SelectionRun]:
        return self._run
    
    async def connect(self) -> bool:
        """
        Locate the config source, read it and subscribe to changes.
        
        Returns:
            False when the source never showed up
        """
        self.status = "Waiting for host configuration..."
        source = await wait_for_capability(
            self._locate_source,
            interval_ms=self._poll_interval_ms,
            timeout_ms=self._connect_timeout_ms,
            description="host config source",
        )
        if source is None:
            self.status = "Host configuration not available - running in demo mode"
            return False
        
        self._source = source
        self._unsubscribe = source.subscribe(self._apply)
        self.status = "Connected to host"
        self._apply(source.get())
        return True
    
    def trigger(self) -> Optional[SelectionRun]:
        """
        Start a run with the current config.
        
        Returns:
            The new run, or None when no target control is configured
        """
        if self._config is None:
            self.status = "No target control configured"
            return None
        
        self._cancel_run()
        run = SelectionRun(self._config, self._document, sink=self._sink)
        self._run = run
        task = run.start()
        task.add_done_callback(lambda _: self._on_run_done(run))
        self.status = f"Selecting first option of '{self._config.target_control_id}'"
        return run
    
    async def wait(self) -> Optional[RunResult]:
        """Wait for the current run, if any."""
        if self._run is None:
            return None
        return await self._run.wait()
    
    async def close(self) -> None:
        """Stop listening to the host and abort any live run."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        run = self._run
        self._cancel_run()
        if run is not None:
            await run.wait()
    
    def _apply(self, values: Mapping[str, Any]) -> None:
        try:
            config = SelectionConfig.from_form(values)
        except NotConfiguredError:
            self._cancel_run()
            self._config = None
            self.status = "Configured: No control specified"
            return
        
        self._config = config
        self.status = f"Configured: {config.target_control_id}"
        logger.debug(f"Config applied: {config.to_dict()}")
        if config.trigger_on_load:
            self.trigger()
    
    def _cancel_run(self) -> None:
        if self._run is not None and not self._run.done:
            self._run.cancel()
    
    def _on_run_done(self, run: SelectionRun) -> None:
        if run is not self._run or run.result is None:
            return
        result = run.result
        if result.cancelled:
            return
        if result.succeeded:
            label = result.selected_label
            self.status = f"Selected '{label}'" if label else "Custom widget opened"
        else:
            self.status = f"Timed out waiting for '{run.config.target_control_id}'"
