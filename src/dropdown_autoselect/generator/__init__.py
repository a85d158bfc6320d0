"""
Generator module - Textual, self-executing form of the engine.
"""

from dropdown_autoselect.generator.script_generator import StandaloneScriptGenerator

__all__ = [
    "StandaloneScriptGenerator",
]
