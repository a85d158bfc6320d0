"""
Dropdown Auto-Select - Select the first meaningful option of a dropdown in any page.

This package locates a target selection control inside a dynamically rendered
document, native <select> or custom widget, and selects its first meaningful
option, retrying and watching the document until it shows up.

Example:
    >>> from dropdown_autoselect import SelectionConfig, SelectionRun
    >>> config = SelectionConfig.from_form({"targetControl": "region"})
    >>> result = await SelectionRun(config, document).run()
"""

__version__ = "0.1.0"

# Public API exports
from dropdown_autoselect.config.settings import Settings
from dropdown_autoselect.engine.engine import SelectionRun, auto_select
from dropdown_autoselect.engine.models import (
    SelectionConfig,
    SelectionOutcome,
    RunResult,
    RunState,
)
from dropdown_autoselect.generator.script_generator import StandaloneScriptGenerator

__all__ = [
    "Settings",
    "SelectionRun",
    "auto_select",
    "SelectionConfig",
    "SelectionOutcome",
    "RunResult",
    "RunState",
    "StandaloneScriptGenerator",
    "__version__",
]
