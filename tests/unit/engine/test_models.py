"""
Tests for engine models: config parsing, outcomes and run state.
"""

import pytest

from dropdown_autoselect.engine.models import (
    OutcomeKind,
    RunResult,
    RunState,
    SelectionConfig,
    SelectionOutcome,
    SelectionVia,
    parse_count,
    parse_flag,
)
from dropdown_autoselect.exceptions import ConfigurationError, NotConfiguredError


class TestParseCount:
    """Test lenient numeric parsing of form values."""
    
    @pytest.mark.parametrize("value,expected", [
        ("5", 5),
        (" 7 ", 7),
        (0, 0),
        (2.0, 2),
        ("abc", 3),
        ("", 3),
        (None, 3),
        (-1, 3),
        ("-4", 3),
        (1.5, 3),
        (True, 3),
    ])
    def test_parse(self, value, expected):
        """Test fallback to the default for unusable input."""
        assert parse_count(value, 3) == expected


class TestParseFlag:
    """Test toggle parsing."""
    
    @pytest.mark.parametrize("value,expected", [
        (True, True),
        (False, False),
        ("true", True),
        ("Yes", True),
        ("off", False),
        ("", False),
        ("maybe", True),
        (None, True),
    ])
    def test_parse(self, value, expected):
        """Test strings and bools, falling back to the default."""
        assert parse_flag(value, True) is expected


class TestSelectionConfig:
    """Test SelectionConfig construction."""
    
    def test_from_form_defaults(self):
        """Test only the target is required."""
        config = SelectionConfig.from_form({"targetControl": "region"})
        assert config.target_control_id == "region"
        assert config.max_retries == 3
        assert config.retry_delay_ms == 1000
        assert config.observer_timeout_ms == 10000
        assert config.await_custom_widget is True
    
    def test_from_form_non_numeric_retries(self):
        """Test non-numeric retries fall back to 3."""
        config = SelectionConfig.from_form({"targetControl": "region", "maxRetries": "abc"})
        assert config.max_retries == 3
    
    def test_from_form_string_values(self):
        """Test host form strings are parsed."""
        config = SelectionConfig.from_form({
            "targetControlId": " region ",
            "maxRetries": "0",
            "retryDelayMs": "250",
            "observerTimeout": "1500",
            "awaitCustomWidget": "false",
            "triggerOnLoad": "no",
        })
        assert config.target_control_id == "region"
        assert config.max_retries == 0
        assert config.retry_delay_ms == 250
        assert config.observer_timeout_ms == 1500
        assert config.await_custom_widget is False
        assert config.trigger_on_load is False
    
    def test_from_form_snake_case(self):
        """Test settings-style keys are accepted."""
        config = SelectionConfig.from_form({"target_control": "region", "max_retries": 1})
        assert config.max_retries == 1
    
    @pytest.mark.parametrize("form", [{}, {"targetControl": ""}, {"targetControl": "   "}, {"targetControl": None}])
    def test_missing_target(self, form):
        """Test missing or blank target is fatal."""
        with pytest.raises(NotConfiguredError):
            SelectionConfig.from_form(form)
    
    def test_direct_validation(self):
        """Test negative counts are rejected by the constructor."""
        with pytest.raises(ConfigurationError):
            SelectionConfig(target_control_id="region", max_retries=-1)
        with pytest.raises(NotConfiguredError):
            SelectionConfig(target_control_id="")
    
    def test_frozen(self):
        """Test the config is immutable."""
        config = SelectionConfig(target_control_id="region")
        with pytest.raises(AttributeError):
            config.max_retries = 10
    
    def test_to_dict(self):
        """Test camelCase serialization."""
        data = SelectionConfig(target_control_id="region", max_retries=2).to_dict()
        assert data["targetControlId"] == "region"
        assert data["maxRetries"] == 2
        assert SelectionConfig.from_form(data) == SelectionConfig(target_control_id="region", max_retries=2)


class TestOutcomes:
    """Test outcome constructors and run results."""
    
    def test_success(self):
        """Test a success carries label and protocol."""
        outcome = SelectionOutcome.success("Alpha", SelectionVia.NATIVE_SELECT)
        assert outcome.is_success
        assert outcome.selected_label == "Alpha"
    
    def test_not_found(self):
        """Test not-found is neither success nor pending."""
        outcome = SelectionOutcome.not_found("missing")
        assert outcome.kind == OutcomeKind.NOT_FOUND
        assert not outcome.is_success
        assert not outcome.is_pending
    
    def test_terminal_states(self):
        """Test only SUCCEEDED and TIMED_OUT are terminal."""
        assert RunState.SUCCEEDED.is_terminal
        assert RunState.TIMED_OUT.is_terminal
        assert not RunState.SEARCHING.is_terminal
        assert not RunState.RETRY_WAITING.is_terminal
        assert not RunState.OBSERVING.is_terminal
    
    def test_run_result_label(self):
        """Test result convenience properties."""
        result = RunResult(
            state=RunState.SUCCEEDED,
            outcome=SelectionOutcome.success("Alpha", SelectionVia.NATIVE_SELECT),
            attempts=1,
        )
        assert result.succeeded
        assert result.selected_label == "Alpha"
        assert RunResult(state=RunState.TIMED_OUT).selected_label is None
