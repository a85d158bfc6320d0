"""
Tests for the host shell and config sources.
"""

import pytest

from dropdown_autoselect.config import Settings, SelectionSettings
from dropdown_autoselect.engine.models import RunState
from dropdown_autoselect.engine.sink import RecordingSink
from dropdown_autoselect.engine.target_resolver import ResolutionStrategy
from dropdown_autoselect.host import AutoSelectShell, SettingsConfigSource, StaticConfigSource
from tests.unit.engine import MockDocument, native_select, wait_until

FAST = {"retryDelayMs": "0", "observerTimeoutMs": "0", "settleDelayMs": "0"}


def form(**values):
    data = dict(FAST)
    data.update(values)
    return data


@pytest.fixture
def document():
    document = MockDocument()
    document.place(ResolutionStrategy.EXACT_ATTRIBUTE, native_select(("", ""), ("a", "Alpha")))
    return document


class TestStaticConfigSource:
    """Test the in-memory config source."""
    
    def test_get_returns_copy(self):
        """Test callers cannot mutate the stored values."""
        source = StaticConfigSource({"targetControl": "region"})
        values = source.get()
        values["targetControl"] = "other"
        assert source.get()["targetControl"] == "region"
    
    def test_update_notifies(self):
        """Test listeners receive the merged values."""
        source = StaticConfigSource({"targetControl": "region"})
        seen = []
        source.subscribe(seen.append)
        
        source.update(maxRetries="5")
        
        assert seen == [{"targetControl": "region", "maxRetries": "5"}]
    
    def test_unsubscribe_twice(self):
        """Test unsubscribe is idempotent."""
        source = StaticConfigSource()
        seen = []
        unsubscribe = source.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        source.update(targetControl="region")
        assert seen == []


class TestSettingsConfigSource:
    """Test settings-backed config."""
    
    def test_values_build_config(self):
        """Test settings values parse into a SelectionConfig."""
        from dropdown_autoselect.engine.models import SelectionConfig
        
        source = SettingsConfigSource(Settings(selection=SelectionSettings(target_control="region")))
        config = SelectionConfig.from_form(source.get())
        assert config.target_control_id == "region"
        source.subscribe(lambda values: None)()


class TestShellConnect:
    """Test connecting to the host."""
    
    @pytest.mark.asyncio
    async def test_initial_status(self, document):
        """Test the status before connecting."""
        shell = AutoSelectShell(document, lambda: None)
        assert shell.status == "Initializing..."
        assert not shell.connected
    
    @pytest.mark.asyncio
    async def test_triggers_on_load(self, document):
        """Test a configured shell starts a run on connect."""
        sink = RecordingSink()
        shell = AutoSelectShell(document, lambda: StaticConfigSource(form(targetControl="dropdown-1")), sink=sink)
        
        assert await shell.connect()
        assert shell.connected
        assert shell.current_run is not None
        
        result = await shell.wait()
        
        assert result.succeeded
        assert shell.status == "Selected 'Alpha'"
        assert sink.contains("Looking for control 'dropdown-1'")
    
    @pytest.mark.asyncio
    async def test_waits_for_late_source(self, document):
        """Test the source is polled until it appears."""
        source = StaticConfigSource(form(targetControl="dropdown-1", triggerOnLoad="false"))
        calls = []
        
        def locate():
            calls.append(1)
            return source if len(calls) >= 3 else None
        
        shell = AutoSelectShell(document, locate, poll_interval_ms=1, connect_timeout_ms=2000)
        
        assert await shell.connect()
        assert len(calls) == 3
        assert shell.status == "Configured: dropdown-1"
        assert shell.current_run is None
    
    @pytest.mark.asyncio
    async def test_demo_mode(self, document):
        """Test giving up when the host never provides a source."""
        shell = AutoSelectShell(document, lambda: None, poll_interval_ms=5, connect_timeout_ms=20)
        
        assert not await shell.connect()
        assert shell.status == "Host configuration not available - running in demo mode"
        assert shell.trigger() is None
        assert shell.status == "No target control configured"


class TestShellConfig:
    """Test reacting to configuration."""
    
    @pytest.mark.asyncio
    async def test_no_control_specified(self, document):
        """Test an empty target never starts a run."""
        shell = AutoSelectShell(document, lambda: StaticConfigSource(form()))
        
        await shell.connect()
        
        assert shell.status == "Configured: No control specified"
        assert shell.config is None
        assert shell.current_run is None
        assert document.resolve_calls == 0
    
    @pytest.mark.asyncio
    async def test_manual_trigger(self, document):
        """Test trigger() when auto-run is off."""
        shell = AutoSelectShell(
            document, lambda: StaticConfigSource(form(targetControl="dropdown-1", triggerOnLoad=False))
        )
        await shell.connect()
        
        run = shell.trigger()
        
        assert run is shell.current_run
        assert shell.status == "Selecting first option of 'dropdown-1'"
        assert (await shell.wait()).selected_label == "Alpha"
    
    @pytest.mark.asyncio
    async def test_config_change_restarts_run(self):
        """Test a new config cancels the live run before starting another."""
        document = MockDocument()
        source = StaticConfigSource(form(targetControl="missing", retryDelayMs="1000", maxRetries="10"))
        shell = AutoSelectShell(document, lambda: source)
        await shell.connect()
        first = shell.current_run
        await wait_until(lambda: first.attempts >= 1)
        
        document.place(ResolutionStrategy.EXACT_ATTRIBUTE, native_select(("a", "Alpha")))
        source.update(targetControl="dropdown-1", retryDelayMs="0")
        second = shell.current_run
        
        assert second is not first
        assert (await first.wait()).cancelled
        assert (await shell.wait()).succeeded
        assert shell.status == "Selected 'Alpha'"
    
    @pytest.mark.asyncio
    async def test_timed_out_status(self):
        """Test the status after a run gives up."""
        shell = AutoSelectShell(MockDocument(), lambda: StaticConfigSource(form(targetControl="missing", maxRetries="0")))
        await shell.connect()
        
        result = await shell.wait()
        
        assert result.state == RunState.TIMED_OUT
        assert shell.status == "Timed out waiting for 'missing'"
    
    @pytest.mark.asyncio
    async def test_close_cancels(self):
        """Test close() aborts the live run and stops listening."""
        document = MockDocument()
        source = StaticConfigSource(form(targetControl="missing", retryDelayMs="1000"))
        shell = AutoSelectShell(document, lambda: source)
        await shell.connect()
        run = shell.current_run
        
        await shell.close()
        source.update(targetControl="other")
        
        assert run.result.cancelled
        assert shell.current_run is run
