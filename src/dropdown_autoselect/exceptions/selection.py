"""
Selection-related exceptions.

Everything except SelectionTimeoutError is recovered inside a run: the
attempt boundary logs it and the retry/observer loop tries again.
"""

from dropdown_autoselect.exceptions.base import DropdownAutoSelectError


class SelectionError(DropdownAutoSelectError):
    """Base exception for selection errors."""
    pass


class ResolutionFailure(SelectionError):
    """
    No element matched the target control this attempt.
    """
    
    def __init__(self, target_id: str):
        super().__init__(f"Control '{target_id}' not found", {"target_id": target_id})
        self.target_id = target_id


class EmptyOptionsFailure(SelectionError):
    """
    Element was found but offers no selectable option.
    """
    
    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message, {"reason": reason} if reason else None)
        self.reason = reason


class RuntimeFault(SelectionError):
    """
    Unexpected error while manipulating the document.
    
    Wraps the original exception (detached node, closed page, script error).
    """
    
    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message, {"cause": type(cause).__name__} if cause else None)
        self.cause = cause


class SelectionTimeoutError(SelectionError):
    """
    Observer window elapsed without a successful selection.
    
    Terminal; attached to the TimedOut run result.
    """
    
    def __init__(self, message: str, timeout_ms: int, attempts: int = 0):
        super().__init__(message, {"timeout_ms": timeout_ms, "attempts": attempts})
        self.timeout_ms = timeout_ms
        self.attempts = attempts
