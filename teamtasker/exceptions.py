"""
Custom exception classes for the task tracker.

Provides specific exceptions for the error scenarios the tracker surfaces
to users and API clients.
"""

from typing import Any, Dict, Optional


class TeamTaskerException(Exception):
    """
    Base exception for all task tracker errors.

    All custom exceptions inherit from this class so handlers can
    catch them in one place.
    """

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize task tracker exception.

        Args:
            message: Human-readable error message
            details: Additional context about the error
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(TeamTaskerException):
    """
    Exception raised when input validation fails.

    Used for empty required form fields and malformed filter selectors.
    The message is what the user sees in the alert region.
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        field_name: str,
        value: Any,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize validation exception.

        Args:
            field_name: Name of the field that failed validation
            value: The invalid value
            reason: User-facing explanation of why validation failed
            details: Additional context about the error
        """
        self.field_name = field_name
        self.value = value
        self.reason = reason
        super().__init__(reason, details)


class TaskNotFoundException(TeamTaskerException):
    """Exception raised when an operation names a task id that does not exist."""

    status_code = 404
    error_code = "task_not_found"

    def __init__(
        self,
        task_id: int,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.task_id = task_id
        super().__init__(f"Task #{task_id} does not exist", details)


class StorageException(TeamTaskerException):
    """
    Exception raised when persisted state cannot be written.

    Load failures never raise; they fall back to the default data.
    """

    error_code = "storage_error"

    def __init__(
        self,
        key: str,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize storage exception.

        Args:
            key: Storage key that was being written
            reason: Description of the underlying failure
            details: Additional context about the error
        """
        self.key = key
        self.reason = reason
        super().__init__(f"Failed to persist '{key}': {reason}", details)
