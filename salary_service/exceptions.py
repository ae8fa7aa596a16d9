"""
Custom exception classes for salary service.

Request-time failures are surfaced to the HTTP caller; load-time
failures are logged and swallowed by the record store.
"""

from typing import Any, Dict, Optional


class SalaryServiceException(Exception):
    """
    Base exception for all salary service errors.

    All custom exceptions should inherit from this class
    for consistent error handling.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize salary service exception.

        Args:
            message: Human-readable error message
            details: Additional context about the error
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class PersistenceError(SalaryServiceException):
    """
    Raised when the backing file cannot be opened or written.

    The message is the underlying OS error text so it can be passed
    straight through to the HTTP response.
    """

    def __init__(
        self,
        path: str,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.path = path
        self.reason = reason
        super().__init__(reason, {"path": path, **(details or {})})
