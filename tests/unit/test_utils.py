"""
Tests for utility helpers.
"""

import asyncio
import logging

import pytest

from dropdown_autoselect.utils.logging import setup_logging
from dropdown_autoselect.utils.retry import wait_for_capability, with_timeout


class TestWaitForCapability:
    """Test bounded capability polling."""
    
    @pytest.mark.asyncio
    async def test_immediate(self):
        """Test an available capability is returned without waiting."""
        assert await wait_for_capability(lambda: "host", interval_ms=1000) == "host"
    
    @pytest.mark.asyncio
    async def test_async_check(self):
        """Test awaitable checks are awaited."""
        calls = []
        
        async def check():
            calls.append(1)
            return "host" if len(calls) == 2 else None
        
        assert await wait_for_capability(check, interval_ms=1, timeout_ms=1000) == "host"
        assert len(calls) == 2
    
    @pytest.mark.asyncio
    async def test_gives_up(self, caplog):
        """Test None after the deadline, with a warning."""
        with caplog.at_level(logging.WARNING):
            result = await wait_for_capability(lambda: None, interval_ms=5, timeout_ms=20, description="host bridge")
        
        assert result is None
        assert "host bridge not available after 20 ms" in caplog.text


class TestWithTimeout:
    """Test coroutine timeouts."""
    
    @pytest.mark.asyncio
    async def test_completes(self):
        """Test a fast coroutine returns its value."""
        async def quick():
            return 42
        
        assert await with_timeout(quick(), 1.0) == 42
    
    @pytest.mark.asyncio
    async def test_times_out(self):
        """Test the custom message on timeout."""
        with pytest.raises(asyncio.TimeoutError, match="too slow"):
            await with_timeout(asyncio.sleep(1), 0.01, error_message="too slow")


class TestLogging:
    """Test logging setup."""
    
    def test_setup_with_file(self, tmp_path):
        """Test a file handler is attached next to the console handler."""
        log_file = tmp_path / "run.log"
        root = logging.getLogger()
        saved = list(root.handlers), root.level
        try:
            setup_logging("DEBUG", log_file=str(log_file))
            logging.getLogger("dropdown_autoselect.test").debug("hello file")
            for handler in root.handlers:
                handler.flush()
            
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 2
            assert "hello file" in log_file.read_text()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved[0]
            root.setLevel(saved[1])
