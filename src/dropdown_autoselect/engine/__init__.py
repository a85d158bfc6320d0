"""
Engine module - Dropdown auto-selection.

Components:
- TargetResolver: Finds the control with prioritized strategies
- OptionSelector: Native-select and custom-widget selection
- RetryController: Fixed-delay, bounded attempts
- ObserverFallback: Mutation-driven attempts under a timeout
- SelectionRun: Orchestrates one run and reports its result once
"""

from dropdown_autoselect.engine.models import (
    SelectionConfig,
    SelectionOutcome,
    SelectionVia,
    OutcomeKind,
    RunState,
    RunResult,
)
from dropdown_autoselect.engine.sink import ISelectionSink, LoggingSink, RecordingSink
from dropdown_autoselect.engine.target_resolver import (
    TargetResolver,
    ResolvedElement,
    ResolutionStrategy,
    RESOLUTION_ORDER,
)
from dropdown_autoselect.engine.option_selector import OptionSelector
from dropdown_autoselect.engine.retry_controller import RetryController
from dropdown_autoselect.engine.observer import ObserverFallback
from dropdown_autoselect.engine.engine import SelectionRun, auto_select

__all__ = [
    # Models
    "SelectionConfig",
    "SelectionOutcome",
    "SelectionVia",
    "OutcomeKind",
    "RunState",
    "RunResult",
    # Sinks
    "ISelectionSink",
    "LoggingSink",
    "RecordingSink",
    # Components
    "TargetResolver",
    "ResolvedElement",
    "ResolutionStrategy",
    "RESOLUTION_ORDER",
    "OptionSelector",
    "RetryController",
    "ObserverFallback",
    # Runs
    "SelectionRun",
    "auto_select",
]
