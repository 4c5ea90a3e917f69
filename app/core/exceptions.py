"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error reporting from services, workers and tasks
- Machine-readable error codes for log filtering and task results
- Detailed error information for debugging

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ConflictError - State conflicts (terminal records, concurrent runs)
    └── ExternalServiceError - Third-party service failures

Usage:
    from core.exceptions import ConflictError

    # Raise with error code and additional details
    raise ConflictError(
        "Checkout is in a final state",
        error_code="CHECKOUT_IMMUTABLE",
        details={"checkout_id": str(checkout.id), "state": checkout.state},
    )

    # Convert to dict for task results
    try:
        ...
    except BaseApplicationError as e:
        return {"status": "failed", **e.to_dict()}

Note:
    These exceptions are for domain/business logic errors.
    Unexpected failures (bugs, database outages) propagate as-is.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Provides a consistent interface for error handling across the application.
    All custom exceptions should inherit from this class.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for callers and log filtering
        details: Additional error context (ids, states, metadata)

    Example:
        try:
            CheckoutStateSyncService.refresh_checkout(checkout_id)
        except BaseApplicationError as e:
            logger.warning(f"Refresh failed: {e.error_code}")
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary.

        Returns:
            Dict with error, error_code, and details keys

        Example:
            {
                "error": "Checkout not found",
                "error_code": "CHECKOUT_NOT_FOUND",
                "details": {"checkout_id": "..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ConflictError(BaseApplicationError):
    """
    Raised when operation conflicts with current resource state.

    Use for:
    - Writes to records that reached a terminal state
    - Concurrent modification conflicts
    - Invalid state transitions
    - Lock contention between workers
    """

    default_error_code: str = "CONFLICT"


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Use for:
    - Payment gateway API failures
    - Network timeouts
    - External service unavailability
    - Unexpected external service responses

    Note:
        Log the original error for debugging. Subclasses declare
        is_retryable so callers can tell transient from permanent failures.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    is_retryable: bool = False
