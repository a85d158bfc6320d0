"""
Base exceptions for Dropdown Auto-Select.
"""


class DropdownAutoSelectError(Exception):
    """
    Base exception for all Dropdown Auto-Select errors.
    
    All custom exceptions inherit from this class, making it easy
    to catch any error from the library.
    
    Attributes:
        message: Human-readable error message
        details: Optional additional error details
    """
    
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(DropdownAutoSelectError):
    """
    Error in configuration.
    
    Raised when there's an issue with settings, environment variables,
    configuration files or host form values.
    """
    pass


class NotConfiguredError(ConfigurationError):
    """
    No target control configured.
    
    Fatal: a run is never started without a target identifier.
    """
    
    def __init__(self, message: str = "No target control configured"):
        super().__init__(message)
