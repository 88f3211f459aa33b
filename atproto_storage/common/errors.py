"""
Error Definitions

Defines the exception classes raised by the storage layer itself.

Failures surfaced by an execution adapter (connection loss, malformed
statement, constraint violation) are never wrapped: they reach the caller
unchanged. A missing or expired key is not an error either, ``get`` simply
returns ``None``.
"""

from typing import Any, Optional


class StorageError(Exception):
    """
    Storage Base Exception

    Base class for all custom exceptions, containing error message, type, and code.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "storage_error",
        code: str = "internal_error",
        details: Optional[dict[str, Any]] = None,
    ):
        """
        Initialize exception

        Args:
            message: Error message
            error_type: Error type
            code: Error code
            details: Extra error details
        """
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary format (for structured logging)

        Returns:
            dict: Error information dictionary
        """
        result = {
            "error": {
                "message": self.message,
                "type": self.error_type,
                "code": self.code,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class ValidationError(StorageError):
    """
    Argument Validation Error

    Raised when an operation receives an empty key or a non-positive TTL.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        code: str = "validation_error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="validation_error",
            code=code,
            details=details,
        )


class ConfigurationError(StorageError):
    """
    Configuration Error

    Raised at construction time when a storage backend is misconfigured,
    e.g. an unsafe table name or an unknown storage type.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        code: str = "configuration_error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="configuration_error",
            code=code,
            details=details,
        )
