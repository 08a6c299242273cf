"""Custom exception classes for the inference engine.

Defines domain-specific exceptions raised by the store, the configuration
loader and the HTTP layer, handled consistently by the exception handlers.
"""

from typing import Optional, Any, Dict


class AppException(Exception):
    """Base exception class for all application exceptions.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional additional error details.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppException):
    """Exception raised when input validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        """Initialize validation error.

        Args:
            message: Validation error message.
            field: Optional field name that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, status_code=400, details=details)


class StorageUnavailableError(AppException):
    """Raised inside the event store when the embedded database cannot be opened.

    The store catches it and degrades to no-op results; it only reaches the
    HTTP layer if a caller asks for the engine directly.
    """

    def __init__(self, message: str = "Event store unavailable", reason: Optional[str] = None):
        details = {"reason": reason} if reason else {}
        super().__init__(message, status_code=503, details=details)


class ConfigurationError(AppException):
    """Exception raised when application configuration is invalid."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        """Initialize configuration error.

        Args:
            message: Configuration error message.
            config_key: Optional configuration key that is invalid.
        """
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, status_code=500, details=details)
