"""
Interfaces module - Abstract base classes for the document boundary.
"""

from dropdown_autoselect.interfaces.document import (
    IDocument,
    IDocumentElement,
    IMutationWatch,
    MutationCallback,
)

__all__ = [
    "IDocument",
    "IDocumentElement",
    "IMutationWatch",
    "MutationCallback",
]
